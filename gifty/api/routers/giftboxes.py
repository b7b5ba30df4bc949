from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, require_admin
from gifty.data.database import get_db
from gifty.domain.errors import NotFoundError
from gifty.domain.schemas import GiftBoxCreate, GiftBoxOut, GiftBoxUpdate, MessageOut
from gifty.services.gift_box_service import GiftBoxService

router = APIRouter(prefix="/giftboxes", tags=["giftboxes"])


@router.get("", response_model=List[GiftBoxOut])
def list_gift_boxes(db: Session = Depends(get_db)):
    return GiftBoxService(db).list_gift_boxes()


@router.post("", response_model=GiftBoxOut, status_code=201)
def create_gift_box(
    payload: GiftBoxCreate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return GiftBoxService(db).create_gift_box(payload)


@router.put("/{box_id}", response_model=GiftBoxOut)
def update_gift_box(
    box_id: int,
    payload: GiftBoxUpdate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return GiftBoxService(db).update_gift_box(box_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{box_id}", response_model=MessageOut)
def delete_gift_box(
    box_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        GiftBoxService(db).delete_gift_box(box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Gift box type deleted"}
