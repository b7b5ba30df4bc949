# gifty/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, get_current_user, get_lock_service, require_admin
from gifty.data.database import get_db
from gifty.domain.errors import ConcurrencyError, NotFoundError
from gifty.domain.schemas import AdminOrderOut, OrderOut, PlaceOrderIn, StatusIn
from gifty.services.lock_service import LockService
from gifty.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, lock_service: LockService | None = None):
    return OrderService(db, lock_service=lock_service)


@router.post("", response_model=OrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Creates an order from the current cart and deletes the cart.
    The notification is sent asynchronously.
    """
    svc = get_service(db, lock_service)
    delivery = payload.delivery.model_dump() if payload.delivery else None
    try:
        return svc.place_order(user.id, delivery)
    except NotFoundError as e:
        # token outlived its user
        raise HTTPException(status_code=401, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut])
def list_my_orders(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_own_orders(user.id)


@router.get("/all", response_model=List[AdminOrderOut])
def list_all_orders(
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_all_orders()


@router.get("/{order_id}", response_model=AdminOrderOut)
def get_order(
    order_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Full order detail for the admin (customer, delivery, items, box).
    """
    svc = get_service(db)
    try:
        return svc.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=AdminOrderOut)
def update_order_status(
    order_id: int,
    payload: StatusIn,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
