# gifty/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


Category = Literal["graduation", "wedding", "birthday", "general"]


class MessageOut(BaseModel):
    message: str


# =====================================================
# AUTH
# =====================================================
class RegisterIn(BaseModel):
    """Schema for account registration."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    reset_token: str
    new_password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    """Public view of a user (never carries the password hash)."""

    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    message: str
    token: str
    user: UserOut


class ResetTokenOut(BaseModel):
    message: str
    reset_token: str


# =====================================================
# CATALOG
# =====================================================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image: str = ""
    category: Category = "general"
    stock: int = Field(0, ge=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Partial update: only fields present in the body are applied."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[Category] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    image: str
    category: str
    stock: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GiftBoxCreate(BaseModel):
    name: str = Field(..., min_length=1)
    theme: str = "general"
    max_items: int = Field(5, ge=1)
    base_price: Decimal = Field(Decimal("0.00"), ge=0)
    image: str = ""
    model_path: str = ""
    scale: float = Field(0.05, gt=0)


class GiftBoxUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    theme: Optional[str] = None
    max_items: Optional[int] = Field(None, ge=1)
    base_price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    model_path: Optional[str] = None
    scale: Optional[float] = Field(None, gt=0)


class GiftBoxOut(BaseModel):
    id: int
    name: str
    theme: str
    max_items: int
    base_price: Decimal
    image: str
    model_path: str
    scale: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReadyBoxItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class ReadyBoxCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    gift_box_id: int = Field(..., gt=0)
    items: List[ReadyBoxItemIn] = Field(default_factory=list)
    image: str = ""
    is_active: bool = True


class ReadyBoxUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    gift_box_id: Optional[int] = Field(None, gt=0)
    items: Optional[List[ReadyBoxItemIn]] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None


class ReadyBoxItemOut(BaseModel):
    product_id: int
    quantity: int
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class ReadyBoxOut(BaseModel):
    id: int
    name: str
    description: str
    gift_box_id: Optional[int] = None
    gift_box: Optional[GiftBoxOut] = None
    items: List[ReadyBoxItemOut]
    total_price: Decimal
    image: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CART
# =====================================================
class AddItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product id (must be > 0)")
    quantity: int = Field(1, gt=0, description="Quantity (must be > 0)")


class UpdateItemIn(BaseModel):
    """Quantity <= 0 removes the line."""

    product_id: int = Field(..., gt=0)
    quantity: int


class SetGiftBoxIn(BaseModel):
    gift_box_id: Optional[int] = None


class CartItemOut(BaseModel):
    product_id: int
    quantity: int
    product: Optional[ProductOut] = None


class CartOut(BaseModel):
    """Cart view with live prices; id is None when the user has no cart yet."""

    id: Optional[int] = None
    user_id: int
    items: List[CartItemOut]
    gift_box_id: Optional[int] = None
    gift_box: Optional[GiftBoxOut] = None
    total: Decimal


# =====================================================
# ORDERS
# =====================================================
class DeliveryIn(BaseModel):
    # required fields are checked by OrderService so the error can name them
    name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    date: Optional[str] = None


class PlaceOrderIn(BaseModel):
    delivery: Optional[DeliveryIn] = None


class StatusIn(BaseModel):
    status: str


class DeliveryOut(BaseModel):
    name: str
    phone: str
    city: str
    address: str
    date: Optional[str] = None


class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    name: str
    price: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    items: List[OrderItemOut]
    gift_box_id: Optional[int] = None
    delivery: DeliveryOut
    total_price: Decimal
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnerOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AdminOrderOut(OrderOut):
    user: Optional[OwnerOut] = None
    gift_box: Optional[GiftBoxOut] = None


# =====================================================
# ADMIN
# =====================================================
class LowStockOut(BaseModel):
    id: int
    name: str
    stock: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class MostSoldOut(BaseModel):
    name: str
    total_sold: int
    revenue: Decimal


class RecentOrderOut(BaseModel):
    id: int
    total_price: Decimal
    status: str
    item_count: int
    created_at: datetime


class StatsOut(BaseModel):
    total_users: int
    total_orders: int
    total_revenue: Decimal
    total_products: int
    active_products: int
    total_ready_boxes: int
    active_ready_boxes: int
    total_gift_boxes: int
    low_stock: List[LowStockOut]
    most_sold: List[MostSoldOut]
    status_counts: dict[str, int]
    recent_orders: List[RecentOrderOut]
