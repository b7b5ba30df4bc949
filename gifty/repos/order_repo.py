# gifty/repos/order_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from gifty.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return select(OrderModel).options(selectinload(OrderModel.items))

    def add_order(self, order: OrderModel) -> OrderModel:
        # no commit: the caller decides together with the cart delete
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int, with_relations: bool = False) -> OrderModel | None:
        stmt = self._query().where(OrderModel.id == order_id)
        if with_relations:
            stmt = stmt.options(selectinload(OrderModel.user), selectinload(OrderModel.gift_box))
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders_by_user(self, user_id: int) -> List[OrderModel]:
        stmt = (
            self._query()
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_all_orders(self) -> List[OrderModel]:
        stmt = (
            self._query()
            .options(selectinload(OrderModel.user), selectinload(OrderModel.gift_box))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.get_order(order_id, with_relations=True)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
