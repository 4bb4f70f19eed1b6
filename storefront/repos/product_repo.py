# storefront/repos/product_repo.py
from typing import List, Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.supermarket import SupermarketModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_supermarket(self, supermarket_id: str) -> SupermarketModel | None:
        return self.db.get(SupermarketModel, supermarket_id)

    def list_supermarkets_with_feed(self) -> List[SupermarketModel]:
        return list(
            self.db.execute(
                select(SupermarketModel).where(SupermarketModel.api_url.is_not(None))
            ).scalars()
        )

    def get_product(self, supermarket_id: str, product_id: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.supermarket_id == supermarket_id,
            )
        ).scalar_one_or_none()

    def get_products_by_ids(self, supermarket_id: str, product_ids: Sequence[str]) -> List[ProductModel]:
        #one round trip for the whole cart
        return list(
            self.db.execute(
                select(ProductModel).where(
                    ProductModel.supermarket_id == supermarket_id,
                    ProductModel.id.in_(list(product_ids)),
                )
            ).scalars()
        )

    def get_product_by_name(self, supermarket_id: str, name: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.supermarket_id == supermarket_id,
                ProductModel.name == name,
            )
        ).scalars().first()

    def list_products(
        self,
        supermarket_id: str,
        search: str | None = None,
        category: str | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel).where(ProductModel.supermarket_id == supermarket_id)
        if search:
            stmt = stmt.where(ProductModel.name.ilike(f"%{search}%"))
        if category:
            stmt = stmt.where(ProductModel.category == category)
        return list(self.db.execute(stmt).scalars())

    def decrement_stock(self, product_id: str, quantity: int) -> int:
        """
        Conditional decrement: UPDATE products SET stock = stock - q
        WHERE id = :id AND stock >= q. Returns rows affected (0 = not enough stock).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        return product

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
