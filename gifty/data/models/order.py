from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from gifty.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # kept for display only, never re-validated
    gift_box_id = Column(Integer, ForeignKey("gift_boxes.id", ondelete="SET NULL"), nullable=True)

    delivery_name = Column(String, nullable=False)
    delivery_phone = Column(String, nullable=False)
    delivery_city = Column(String, nullable=False)
    delivery_address = Column(String, nullable=False)
    delivery_date = Column(String, nullable=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, preparing, shipped, delivered
    total_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    user = relationship("UserModel")
    gift_box = relationship("GiftBoxModel")
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )

    @property
    def delivery(self) -> dict:
        return {
            "name": self.delivery_name,
            "phone": self.delivery_phone,
            "city": self.delivery_city,
            "address": self.delivery_address,
            "date": self.delivery_date,
        }
