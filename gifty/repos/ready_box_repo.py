from typing import List

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from gifty.data.models.ready_box import ReadyBoxModel, ReadyBoxItemModel


class ReadyBoxRepo:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return select(ReadyBoxModel).options(
            selectinload(ReadyBoxModel.gift_box),
            selectinload(ReadyBoxModel.items).selectinload(ReadyBoxItemModel.product),
        )

    def get_ready_box(self, box_id: int) -> ReadyBoxModel | None:
        return self.db.execute(
            self._query().where(ReadyBoxModel.id == box_id)
        ).scalar_one_or_none()

    def list_ready_boxes(self, active_only: bool = True) -> List[ReadyBoxModel]:
        stmt = self._query()
        if active_only:
            stmt = stmt.where(ReadyBoxModel.is_active.is_(True))
        stmt = stmt.order_by(ReadyBoxModel.created_at.desc(), ReadyBoxModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def count_ready_boxes(self, active_only: bool = False) -> int:
        stmt = select(func.count(ReadyBoxModel.id))
        if active_only:
            stmt = stmt.where(ReadyBoxModel.is_active.is_(True))
        return self.db.execute(stmt).scalar_one()

    def save(self, box: ReadyBoxModel) -> ReadyBoxModel:
        self.db.add(box)
        self.db.commit()
        self.db.refresh(box)
        return box

    def delete(self, box: ReadyBoxModel) -> None:
        self.db.delete(box)
        self.db.commit()
