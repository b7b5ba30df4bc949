# gifty/repos/product_repo.py
from decimal import Decimal
from typing import Dict, Iterable, List

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from gifty.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(
        self,
        active_only: bool = True,
        category: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel)
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if category:
            stmt = stmt.where(ProductModel.category == category)
        if search:
            stmt = stmt.where(ProductModel.name.ilike(f"%{search}%"))
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_low_stock(self, threshold: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.is_active.is_(True), ProductModel.stock <= threshold)
            .order_by(ProductModel.stock.asc(), ProductModel.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_products(self, active_only: bool = False) -> int:
        stmt = select(func.count(ProductModel.id))
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        return self.db.execute(stmt).scalar_one()

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
