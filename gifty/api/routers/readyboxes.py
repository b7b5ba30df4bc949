from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, require_admin
from gifty.data.database import get_db
from gifty.domain.errors import NotFoundError
from gifty.domain.schemas import MessageOut, ReadyBoxCreate, ReadyBoxOut, ReadyBoxUpdate
from gifty.services.ready_box_service import ReadyBoxService

router = APIRouter(prefix="/readyboxes", tags=["readyboxes"])


def get_service(db: Session):
    return ReadyBoxService(db)


@router.get("", response_model=List[ReadyBoxOut])
def list_ready_boxes(db: Session = Depends(get_db)):
    return get_service(db).list_ready_boxes()


@router.get("/all", response_model=List[ReadyBoxOut])
def list_all_ready_boxes(_: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_all_ready_boxes()


@router.get("/{box_id}", response_model=ReadyBoxOut)
def get_ready_box(box_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_ready_box(box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=ReadyBoxOut, status_code=201)
def create_ready_box(
    payload: ReadyBoxCreate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).create_ready_box(payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{box_id}", response_model=ReadyBoxOut)
def update_ready_box(
    box_id: int,
    payload: ReadyBoxUpdate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_ready_box(box_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{box_id}", response_model=MessageOut)
def delete_ready_box(
    box_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).delete_ready_box(box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Ready box deleted"}
