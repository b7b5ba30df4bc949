# gifty/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, get_current_user
from gifty.data.database import get_db
from gifty.domain.errors import ConcurrencyError, NotFoundError
from gifty.domain.schemas import AddItemIn, CartOut, MessageOut, SetGiftBoxIn, UpdateItemIn
from gifty.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).get_cart(user.id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(user.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/update", response_model=CartOut)
def update_item(
    payload: UpdateItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/remove/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user.id, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/giftbox", response_model=CartOut)
def set_gift_box(
    payload: SetGiftBoxIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_gift_box(user.id, payload.gift_box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/readybox/{ready_box_id}", response_model=CartOut)
def load_ready_box(
    ready_box_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replaces the cart with the contents of a ready box."""
    svc = get_service(db)
    try:
        return svc.load_ready_box(user.id, ready_box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/clear", response_model=MessageOut)
def clear_cart(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    get_service(db).clear_cart(user.id)
    return {"message": "Cart cleared"}
