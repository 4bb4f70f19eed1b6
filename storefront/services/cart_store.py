# storefront/services/cart_store.py
from decimal import Decimal
from typing import List

import redis

from storefront.domain.errors import InsufficientStock, NotFound
from storefront.domain.schemas import CartItem, ProductSnapshot
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartStore:
    """
    Buyer's cart per supermarket, kept outside the ledger.

    One redis hash per cart: field = product id, value = CartItem json.
    Quantities are clamped to the stock seen when the product was added or
    updated; checkout re-validates against live stock anyway.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None, ttl: int = CART_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def cart_key(supermarket_id: str, user_id: str) -> str:
        return f"cart:{supermarket_id}:{user_id}"

    @redis_retry()
    def get_items(self, supermarket_id: str, user_id: str) -> List[CartItem]:
        raw = self.redis.hgetall(self.cart_key(supermarket_id, user_id))
        return [CartItem.model_validate_json(value) for value in raw.values()]

    @redis_retry()
    def add_item(self, supermarket_id: str, user_id: str, product: ProductSnapshot, quantity: int = 1) -> List[CartItem]:
        if product.stock <= 0:
            raise InsufficientStock(product.name)

        key = self.cart_key(supermarket_id, user_id)
        current = self.redis.hget(key, product.id)
        existing = CartItem.model_validate_json(current).quantity if current else 0

        new_quantity = min(existing + quantity, product.stock)
        if new_quantity == existing:
            logger.info(f"Product {product.id} already at stock limit in cart {key}")
        item = CartItem(product=product, quantity=new_quantity)
        self._save(key, item)
        return self.get_items(supermarket_id, user_id)

    @redis_retry()
    def update_quantity(self, supermarket_id: str, user_id: str, product_id: str, quantity: int) -> List[CartItem]:
        key = self.cart_key(supermarket_id, user_id)
        current = self.redis.hget(key, product_id)
        if not current:
            raise NotFound(f"Product {product_id} is not in the cart")

        item = CartItem.model_validate_json(current)
        if item.product.stock <= 0:
            raise InsufficientStock(item.product.name)
        #clamp to [1, stock], same as the quantity picker
        item.quantity = min(max(quantity, 1), item.product.stock)
        self._save(key, item)
        return self.get_items(supermarket_id, user_id)

    @redis_retry()
    def remove_item(self, supermarket_id: str, user_id: str, product_id: str) -> List[CartItem]:
        self.redis.hdel(self.cart_key(supermarket_id, user_id), product_id)
        return self.get_items(supermarket_id, user_id)

    @redis_retry()
    def clear(self, supermarket_id: str, user_id: str) -> None:
        self.redis.delete(self.cart_key(supermarket_id, user_id))

    @staticmethod
    def total(items: List[CartItem]) -> Decimal:
        #display only, checkout prices from the ledger
        return sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

    def _save(self, key: str, item: CartItem) -> None:
        pipe = self.redis.pipeline()
        pipe.hset(key, item.product.id, item.model_dump_json())
        pipe.expire(key, self.ttl)
        pipe.execute()
