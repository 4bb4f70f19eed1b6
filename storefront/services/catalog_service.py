# storefront/services/catalog_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.product_request import ProductRequestModel
from storefront.domain.errors import NotFound
from storefront.domain.schemas import Buyer
from storefront.repos.product_repo import ProductRepo
from storefront.repos.product_request_repo import ProductRequestRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_SORT_KEYS = {
    "priceAsc": (lambda p: p.price, False),
    "priceDesc": (lambda p: p.price, True),
    "stock": (lambda p: p.stock, True),
}


class CatalogService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.requests = ProductRequestRepo(db)

    def _require_supermarket(self, supermarket_id: str):
        supermarket = self.repo.get_supermarket(supermarket_id)
        if not supermarket:
            raise NotFound(f"Supermarket {supermarket_id} not found")
        return supermarket

    def list_products(
        self,
        supermarket_id: str,
        search: str | None = None,
        category: str | None = None,
        sort: str = "priceAsc",
    ) -> List[ProductModel]:
        self._require_supermarket(supermarket_id)
        products = self.repo.list_products(supermarket_id, search=search, category=category)

        key, reverse = _SORT_KEYS.get(sort, _SORT_KEYS["priceAsc"])
        return sorted(products, key=key, reverse=reverse)

    def get_product(self, supermarket_id: str, product_id: str) -> ProductModel:
        product = self.repo.get_product(supermarket_id, product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    def request_product(self, supermarket_id: str, buyer: Buyer, text: str) -> ProductRequestModel:
        self._require_supermarket(supermarket_id)
        created = self.requests.create_request(
            ProductRequestModel(
                supermarket_id=supermarket_id,
                user_id=buyer.id,
                request=text.strip(),
            )
        )
        logger.info(f"Product request {created.id} for supermarket {supermarket_id}")
        return created
