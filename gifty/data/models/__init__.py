# import every model so SQLAlchemy registers it in Base.metadata

from gifty.data.models.user import UserModel
from gifty.data.models.product import ProductModel
from gifty.data.models.gift_box import GiftBoxModel
from gifty.data.models.ready_box import ReadyBoxModel, ReadyBoxItemModel
from gifty.data.models.cart import CartModel
from gifty.data.models.cart_item import CartItemModel
from gifty.data.models.order import OrderModel
from gifty.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "GiftBoxModel",
    "ReadyBoxModel",
    "ReadyBoxItemModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
