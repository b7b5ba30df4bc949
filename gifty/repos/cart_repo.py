# gifty/repos/cart_repo.py
from typing import Any, Dict

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session, selectinload

from gifty.data.models.cart import CartModel
from gifty.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)

    def replace_items(self, cart: CartModel, items: list[CartItemModel]) -> None:
        cart.items.clear()
        self.db.flush()
        cart.items.extend(items)

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        """Optimistic locking: UPDATE ... WHERE id = :id AND version = :old_version."""
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def delete_cart_if_version(self, cart: CartModel) -> int:
        """Deletes the cart only if nobody touched it since it was read."""
        cart_id, version = cart.id, cart.version
        result = self.db.execute(
            delete(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == version)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.db.execute(
                delete(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .execution_options(synchronize_session=False)
            )
            # rows are gone, drop the stale objects from the session too
            for item in list(cart.items):
                self.db.expunge(item)
            self.db.expunge(cart)
        return result.rowcount

    def delete_cart_by_user(self, user_id: int) -> int:
        cart = self.get_cart_by_user(user_id)
        if not cart:
            return 0
        self.db.delete(cart)
        self.db.commit()
        return 1

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
