from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship

from gifty.data.database import Base


class ReadyBoxModel(Base):
    __tablename__ = "ready_boxes"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    gift_box_id = Column(Integer, ForeignKey("gift_boxes.id", ondelete="SET NULL"), nullable=True)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    image = Column(String, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    gift_box = relationship("GiftBoxModel")
    items = relationship(
        "ReadyBoxItemModel",
        back_populates="ready_box",
        cascade="all, delete-orphan",
        order_by="ReadyBoxItemModel.id",
    )


class ReadyBoxItemModel(Base):
    __tablename__ = "ready_box_items"

    id = Column(Integer, primary_key=True)
    ready_box_id = Column(Integer, ForeignKey("ready_boxes.id", ondelete="CASCADE"), nullable=False)
    # no FK: a deleted product leaves the line without a product
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    ready_box = relationship("ReadyBoxModel", back_populates="items")
    product = relationship(
        "ProductModel",
        primaryjoin="foreign(ReadyBoxItemModel.product_id) == ProductModel.id",
        viewonly=True,
    )
