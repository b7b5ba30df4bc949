from typing import List

from sqlalchemy.orm import Session

from gifty.data.models.gift_box import GiftBoxModel
from gifty.domain.errors import NotFoundError
from gifty.domain.pricing import to_money
from gifty.domain.schemas import GiftBoxCreate, GiftBoxUpdate
from gifty.repos.gift_box_repo import GiftBoxRepo
from gifty.utils.logging import get_logger

logger = get_logger(__name__)


class GiftBoxService:
    """Box types the customer picks in the box builder."""

    def __init__(self, db: Session):
        self.repo = GiftBoxRepo(db)

    def list_gift_boxes(self) -> List[GiftBoxModel]:
        return self.repo.list_gift_boxes()

    def get_gift_box(self, box_id: int) -> GiftBoxModel:
        box = self.repo.get_gift_box(box_id)
        if not box:
            raise NotFoundError("Gift box not found")
        return box

    def create_gift_box(self, payload: GiftBoxCreate) -> GiftBoxModel:
        data = payload.model_dump()
        data["base_price"] = to_money(data["base_price"])
        box = self.repo.save(GiftBoxModel(**data))
        logger.info(f"Gift box {box.id} created")
        return box

    def update_gift_box(self, box_id: int, payload: GiftBoxUpdate) -> GiftBoxModel:
        box = self.get_gift_box(box_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if field == "base_price":
                value = to_money(value)
            setattr(box, field, value)
        return self.repo.save(box)

    def delete_gift_box(self, box_id: int) -> None:
        box = self.get_gift_box(box_id)
        self.repo.delete(box)
        logger.info(f"Gift box {box_id} deleted")
