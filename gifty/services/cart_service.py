from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gifty.data.models.cart import CartModel
from gifty.data.models.cart_item import CartItemModel
from gifty.domain.errors import ConcurrencyError, NotFoundError
from gifty.domain.pricing import order_total
from gifty.repos.cart_repo import CartRepo
from gifty.repos.gift_box_repo import GiftBoxRepo
from gifty.repos.product_repo import ProductRepo
from gifty.repos.ready_box_repo import ReadyBoxRepo
from gifty.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Simple CQRS split for the cart domain:
    commands (add, update, remove, set box, load ready box, clear) change state,
    the query (get) only reads. One cart per user, created lazily.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.gift_box_repo = GiftBoxRepo(db)
        self.ready_box_repo = ReadyBoxRepo(db)

    # query - read only
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return {
                "id": None,
                "user_id": user_id,
                "items": [],
                "gift_box_id": None,
                "gift_box": None,
                "total": order_total([]),
            }

        # live prices, a missing product shows up as product None
        products = self.product_repo.get_products_by_ids(i.product_id for i in cart.items)
        box = self.gift_box_repo.get_gift_box(cart.gift_box_id) if cart.gift_box_id else None
        priced = [
            (products[i.product_id].price, i.quantity)
            for i in cart.items
            if i.product_id in products
        ]

        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "product": products.get(i.product_id),
                }
                for i in cart.items
            ],
            "gift_box_id": box.id if box else None,
            "gift_box": box,
            "total": order_total(priced, box.base_price if box else None),
        }

    # commands
    def _get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id, version=1))
        except IntegrityError:
            # another request created it first, unique user_id
            self.repo.rollback()
            created = self.repo.get_cart_by_user(user_id)
            if not created:
                raise
            return created

        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _bump_version(self, cart: CartModel, **new_data):
        # Optimistic locking on the version column
        # e.g. UPDATE carts SET version = 2 WHERE id = 1 AND version = 1
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1, **new_data},
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyError("Cart was modified by another request")

        self.repo.commit()

    def _get_active_product(self, product_id: int):
        product = self.product_repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        if not product.is_active:
            raise ValueError(f"Product {product_id} is not available")
        return product

    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        self._get_active_product(product_id)
        cart = self._get_or_create_cart(user_id)

        existing_item = self.repo.get_cart_item(cart.id, product_id)
        if existing_item:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        self._bump_version(cart)
        return self.get_cart(user_id)

    def update_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Item not in cart")

        if quantity <= 0:
            # never keep a line with a non-positive quantity
            logger.info(f"Quantity {quantity} for product {product_id}, removing it from cart {cart.id}")
            self.repo.delete_cart_item(item)
        else:
            logger.info(f"Cart {cart.id}: product {product_id} quantity set to {quantity}")
            item.quantity = quantity

        self._bump_version(cart)
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if item:
            logger.info(f"Removing product {product_id} from cart {cart.id}")
            self.repo.delete_cart_item(item)

        self._bump_version(cart)
        return self.get_cart(user_id)

    def set_gift_box(self, user_id: int, gift_box_id: int | None) -> Dict[str, Any]:
        if gift_box_id is not None and not self.gift_box_repo.get_gift_box(gift_box_id):
            raise NotFoundError("Gift box not found")

        cart = self._get_or_create_cart(user_id)
        logger.info(f"Cart {cart.id}: gift box set to {gift_box_id}")

        self._bump_version(cart, gift_box_id=gift_box_id)
        return self.get_cart(user_id)

    def load_ready_box(self, user_id: int, ready_box_id: int) -> Dict[str, Any]:
        """
        Replaces the cart contents with the products and box type of a
        ready box. Prices stay live, like for any other cart line.
        """
        ready_box = self.ready_box_repo.get_ready_box(ready_box_id)
        if not ready_box or not ready_box.is_active:
            raise NotFoundError("Ready box not found")

        quantities: Dict[int, int] = {}
        for line in ready_box.items:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity

        cart = self._get_or_create_cart(user_id)
        self.repo.replace_items(
            cart,
            [
                CartItemModel(product_id=product_id, quantity=qty)
                for product_id, qty in quantities.items()
            ],
        )
        logger.info(f"Cart {cart.id} loaded from ready box {ready_box_id}")

        self._bump_version(cart, gift_box_id=ready_box.gift_box_id)
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> None:
        deleted = self.repo.delete_cart_by_user(user_id)
        if deleted:
            logger.info(f"Cart of user {user_id} cleared")
