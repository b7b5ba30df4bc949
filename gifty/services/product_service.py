from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from gifty.data.models.product import ProductModel
from gifty.domain.errors import NotFoundError
from gifty.domain.pricing import to_money
from gifty.domain.schemas import ProductCreate, ProductUpdate
from gifty.repos.product_repo import ProductRepo
from gifty.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> List[ProductModel]:
        """Storefront listing: active products only, newest first."""
        return self.repo.list_products(
            active_only=True,
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price,
        )

    def list_all_products(self) -> List[ProductModel]:
        return self.repo.list_products(active_only=False)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, payload: ProductCreate) -> ProductModel:
        data = payload.model_dump()
        data["price"] = to_money(data["price"])
        product = self.repo.save(ProductModel(**data))
        logger.info(f"Product {product.id} created")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if field == "price":
                value = to_money(value)
            setattr(product, field, value)
        product = self.repo.save(product)
        logger.info(f"Product {product_id} updated")
        return product

    def toggle_product(self, product_id: int) -> ProductModel:
        product = self.get_product(product_id)
        product.is_active = not product.is_active
        product = self.repo.save(product)
        logger.info(f"Product {product_id} active={product.is_active}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.repo.delete(product)
        logger.info(f"Product {product_id} deleted")
