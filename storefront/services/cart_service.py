# storefront/services/cart_service.py
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.domain.schemas import CartItem, ProductSnapshot
from storefront.services.cart_store import CartStore
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases on top of the cart store.
    Commands (add, update, remove, clear) take a fresh product snapshot so
    the stock clamp uses current numbers; the query only reads.
    """

    def __init__(self, db: Session, cart_store: CartStore):
        self.catalog = CatalogService(db)
        self.store = cart_store

    def _view(self, supermarket_id: str, items: List[CartItem]) -> Dict[str, Any]:
        return {
            "supermarket_id": supermarket_id,
            "items": items,
            "total": CartStore.total(items),
        }

    #query
    def get_cart(self, supermarket_id: str, user_id: str) -> Dict[str, Any]:
        return self._view(supermarket_id, self.store.get_items(supermarket_id, user_id))

    #commands
    def add_product(self, supermarket_id: str, user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        product = self.catalog.get_product(supermarket_id, product_id)
        snapshot = ProductSnapshot.model_validate(product)

        logger.info(f"Adding {quantity} x {product_id} to cart of {user_id} in {supermarket_id}")
        items = self.store.add_item(supermarket_id, user_id, snapshot, quantity)
        return self._view(supermarket_id, items)

    def update_quantity(self, supermarket_id: str, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        items = self.store.update_quantity(supermarket_id, user_id, product_id, quantity)
        return self._view(supermarket_id, items)

    def remove_product(self, supermarket_id: str, user_id: str, product_id: str) -> Dict[str, Any]:
        logger.info(f"Removing {product_id} from cart of {user_id} in {supermarket_id}")
        return self._view(supermarket_id, self.store.remove_item(supermarket_id, user_id, product_id))

    def clear(self, supermarket_id: str, user_id: str) -> Dict[str, Any]:
        self.store.clear(supermarket_id, user_id)
        return self._view(supermarket_id, [])
