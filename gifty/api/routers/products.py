# gifty/api/routers/products.py
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, require_admin
from gifty.data.database import get_db
from gifty.domain.errors import NotFoundError
from gifty.domain.schemas import Category, MessageOut, ProductCreate, ProductOut, ProductUpdate
from gifty.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=List[ProductOut])
def list_products(
    category: Optional[Category] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    """Active products, newest first, e.g. ?category=wedding&search=glass&max_price=80"""
    return get_service(db).list_products(category, search, min_price, max_price)


@router.get("/all", response_model=List[ProductOut])
def list_all_products(_: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Includes inactive products."""
    return get_service(db).list_all_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_product(payload)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_product(product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{product_id}/toggle", response_model=ProductOut)
def toggle_product(
    product_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).toggle_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Product deleted"}
