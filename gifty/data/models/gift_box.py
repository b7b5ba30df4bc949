from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Float

from gifty.data.database import Base


class GiftBoxModel(Base):
    __tablename__ = "gift_boxes"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    theme = Column(String, nullable=False, default="general")
    max_items = Column(Integer, nullable=False, default=5)
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    image = Column(String, nullable=False, default="")
    model_path = Column(String, nullable=False, default="")  # 3D model served by the frontend
    scale = Column(Float, nullable=False, default=0.05)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
