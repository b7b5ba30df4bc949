from typing import List

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from gifty.data.models.gift_box import GiftBoxModel


class GiftBoxRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_gift_box(self, box_id: int) -> GiftBoxModel | None:
        return self.db.get(GiftBoxModel, box_id)

    def list_gift_boxes(self) -> List[GiftBoxModel]:
        return list(self.db.execute(select(GiftBoxModel).order_by(GiftBoxModel.id)).scalars().all())

    def count_gift_boxes(self) -> int:
        return self.db.execute(select(func.count(GiftBoxModel.id))).scalar_one()

    def save(self, box: GiftBoxModel) -> GiftBoxModel:
        self.db.add(box)
        self.db.commit()
        self.db.refresh(box)
        return box

    def delete(self, box: GiftBoxModel) -> None:
        self.db.delete(box)
        self.db.commit()
