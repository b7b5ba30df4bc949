# gifty/services/order_service.py
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gifty.data.models.order import OrderModel
from gifty.data.models.order_item import OrderItemModel
from gifty.domain.errors import (
    ConcurrencyError,
    EmptyCartError,
    InvalidDeliveryInfoError,
    InvalidStatusError,
    NotFoundError,
    ProductUnavailableError,
)
from gifty.domain.pricing import order_total, to_money
from gifty.domain.schemas import OrderStatus
from gifty.repos.cart_repo import CartRepo
from gifty.repos.gift_box_repo import GiftBoxRepo
from gifty.repos.order_repo import OrderRepo
from gifty.repos.product_repo import ProductRepo
from gifty.repos.user_repo import UserRepo
from gifty.services.lock_service import LockService
from gifty.services.notification_service import NotificationService
from gifty.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_DELIVERY_FIELDS = ("name", "phone", "city", "address")


def missing_delivery_fields(delivery: Optional[Dict[str, Any]]) -> List[str]:
    delivery = delivery or {}
    missing = []
    for field in REQUIRED_DELIVERY_FIELDS:
        value = delivery.get(field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
    return missing


class OrderService:
    """
    Order domain, kept apart from CartService.
    The only writer of orders; reads the cart and deletes it on checkout.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.gift_box_repo = GiftBoxRepo(db)
        self.user_repo = UserRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def place_order(self, user_id: int, delivery: Optional[Dict[str, Any]]) -> OrderModel:
        """
        Use case: turn the user's cart into an order.

        1. Cart must exist and have items
        2. Delivery info must have name, phone, city, address
        3. Every product must still exist and be active
        4. Snapshot name + price of each line
        5. Total = lines + box base price
        6. Save order and delete cart in one transaction
        7. Queue notification

        Runs under the per-user checkout lock, so a second concurrent call
        only sees the cart after the first one deleted it.
        """
        if self.lock_service is None:
            self.lock_service = LockService()

        with self.lock_service.checkout_lock(user_id):
            order = self._place_order(user_id, delivery)

        self.notification_service.send_order_notification(user_id, order.id)
        return order

    def _place_order(self, user_id: int, delivery: Optional[Dict[str, Any]]) -> OrderModel:
        # the token is trusted, but its user may have been deleted since
        if not self.user_repo.get_user(user_id):
            raise NotFoundError("User not found")

        cart = self.cart_repo.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise EmptyCartError()

        missing = missing_delivery_fields(delivery)
        if missing:
            logger.info(f"Checkout for user {user_id} rejected, missing delivery fields: {missing}")
            raise InvalidDeliveryInfoError(missing)

        products = self.product_repo.get_products_by_ids(i.product_id for i in cart.items)
        unavailable = [
            i.product_id
            for i in cart.items
            if i.product_id not in products or not products[i.product_id].is_active
        ]
        if unavailable:
            logger.warning(f"Checkout for user {user_id} rejected, unavailable products: {unavailable}")
            raise ProductUnavailableError(unavailable)

        # pricing moment: later catalog changes do not touch these lines
        lines = [
            OrderItemModel(
                position=pos,
                product_id=item.product_id,
                name=products[item.product_id].name,
                price=to_money(products[item.product_id].price),
                quantity=item.quantity,
            )
            for pos, item in enumerate(cart.items)
        ]

        box = self.gift_box_repo.get_gift_box(cart.gift_box_id) if cart.gift_box_id else None
        total = order_total(
            ((line.price, line.quantity) for line in lines),
            box.base_price if box else None,
        )

        order = OrderModel(
            user_id=user_id,
            gift_box_id=box.id if box else None,
            delivery_name=delivery["name"].strip(),
            delivery_phone=delivery["phone"].strip(),
            delivery_city=delivery["city"].strip(),
            delivery_address=delivery["address"].strip(),
            delivery_date=delivery.get("date") or None,
            status=OrderStatus.PENDING.value,
            total_price=total,
            items=lines,
        )

        try:
            self.repo.add_order(order)
            deleted = self.cart_repo.delete_cart_if_version(cart)
            if deleted == 0:
                self.repo.rollback()
                # vanished and changed carts are different errors for the caller
                current = self.cart_repo.get_cart_by_user(user_id)
                if not current or not current.items:
                    raise EmptyCartError()
                logger.warning(f"Checkout for user {user_id} rejected, cart {cart.id} changed during checkout")
                raise ConcurrencyError("Cart was modified during checkout, please review it and try again")
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created from cart {cart.id} for user {user_id}, total {total}")
        return order

    # =====================================================
    # QUERIES
    # =====================================================
    def list_own_orders(self, user_id: int) -> List[OrderModel]:
        return self.repo.list_orders_by_user(user_id)

    def list_all_orders(self) -> List[OrderModel]:
        return self.repo.list_all_orders()

    def get_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id, with_relations=True)
        if not order:
            raise NotFoundError("Order not found")
        return order

    # =====================================================
    # ADMIN
    # =====================================================
    def update_status(self, order_id: int, status: str) -> OrderModel:
        """
        Any status may be set from any other one; progression is not
        forced to be forward-only.
        """
        valid = [s.value for s in OrderStatus]
        if status not in valid:
            raise InvalidStatusError(f"Invalid status '{status}', expected one of: {', '.join(valid)}")

        order = self.repo.update_order_status(order_id, status)
        if not order:
            raise NotFoundError("Order not found")

        logger.info(f"Order {order_id} status set to {status}")
        self.notification_service.send_status_notification(order.user_id, order.id, status)
        return order
