from typing import List

from sqlalchemy.orm import Session

from gifty.data.models.ready_box import ReadyBoxModel, ReadyBoxItemModel
from gifty.domain.errors import NotFoundError
from gifty.domain.pricing import order_total
from gifty.domain.schemas import ReadyBoxCreate, ReadyBoxUpdate
from gifty.repos.gift_box_repo import GiftBoxRepo
from gifty.repos.product_repo import ProductRepo
from gifty.repos.ready_box_repo import ReadyBoxRepo
from gifty.utils.logging import get_logger

logger = get_logger(__name__)


class ReadyBoxService:
    """
    Ready-made bundles curated by the admin. total_price is recomputed from
    current catalog prices on every write; a product that no longer exists
    counts as 0.
    """

    def __init__(self, db: Session):
        self.repo = ReadyBoxRepo(db)
        self.product_repo = ProductRepo(db)
        self.gift_box_repo = GiftBoxRepo(db)

    def list_ready_boxes(self) -> List[ReadyBoxModel]:
        return self.repo.list_ready_boxes(active_only=True)

    def list_all_ready_boxes(self) -> List[ReadyBoxModel]:
        return self.repo.list_ready_boxes(active_only=False)

    def get_ready_box(self, box_id: int) -> ReadyBoxModel:
        box = self.repo.get_ready_box(box_id)
        if not box:
            raise NotFoundError("Ready box not found")
        return box

    def _check_gift_box(self, gift_box_id: int):
        box = self.gift_box_repo.get_gift_box(gift_box_id)
        if not box:
            raise NotFoundError("Gift box not found")
        return box

    def _recalculate(self, ready_box: ReadyBoxModel):
        products = self.product_repo.get_products_by_ids(i.product_id for i in ready_box.items)
        box = self.gift_box_repo.get_gift_box(ready_box.gift_box_id) if ready_box.gift_box_id else None
        ready_box.total_price = order_total(
            ((products[i.product_id].price, i.quantity) for i in ready_box.items if i.product_id in products),
            box.base_price if box else None,
        )

    def create_ready_box(self, payload: ReadyBoxCreate) -> ReadyBoxModel:
        self._check_gift_box(payload.gift_box_id)

        ready_box = ReadyBoxModel(
            name=payload.name,
            description=payload.description,
            gift_box_id=payload.gift_box_id,
            image=payload.image,
            is_active=payload.is_active,
            items=[ReadyBoxItemModel(product_id=i.product_id, quantity=i.quantity) for i in payload.items],
        )
        self._recalculate(ready_box)
        ready_box = self.repo.save(ready_box)
        logger.info(f"Ready box {ready_box.id} created, total {ready_box.total_price}")
        return ready_box

    def update_ready_box(self, box_id: int, payload: ReadyBoxUpdate) -> ReadyBoxModel:
        ready_box = self.get_ready_box(box_id)
        data = payload.model_dump(exclude_unset=True)

        if data.get("gift_box_id") is not None:
            self._check_gift_box(data["gift_box_id"])
            ready_box.gift_box_id = data["gift_box_id"]
        if payload.items is not None:
            ready_box.items = [
                ReadyBoxItemModel(product_id=i.product_id, quantity=i.quantity) for i in payload.items
            ]
        for field in ("name", "description", "image", "is_active"):
            if data.get(field) is not None:
                setattr(ready_box, field, data[field])

        self._recalculate(ready_box)
        ready_box = self.repo.save(ready_box)
        logger.info(f"Ready box {box_id} updated, total {ready_box.total_price}")
        return ready_box

    def delete_ready_box(self, box_id: int) -> None:
        ready_box = self.get_ready_box(box_id)
        self.repo.delete(ready_box)
        logger.info(f"Ready box {box_id} deleted")
