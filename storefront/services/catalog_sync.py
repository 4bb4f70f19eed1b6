# storefront/services/catalog_sync.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import requests
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.supermarket import SupermarketModel
from storefront.repos.product_repo import ProductRepo
from storefront.utils.retry import http_retry
from storefront.utils.settings import HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SupermarketFeedClient:
    def __init__(self, timeout: int = HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    @http_retry()
    def fetch_products(self, api_url: str) -> List[Dict[str, Any]]:
        logger.info(f"SupermarketFeedClient GET {api_url}")
        resp = requests.get(api_url, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"Feed {api_url} did not return a list")
        return data


def _price(value) -> Decimal:
    try:
        return Decimal(str(value or 0)).quantize(Decimal("0.01"))
    except InvalidOperation:
        return Decimal("0.00")


def _stock(value) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


class CatalogSync:
    """Pulls each supermarket's product feed and upserts by (supermarket, name)."""

    def __init__(self, db: Session, feed_client: SupermarketFeedClient):
        self.repo = ProductRepo(db)
        self.feed_client = feed_client

    def sync_supermarket(self, supermarket: SupermarketModel) -> int:
        feed = self.feed_client.fetch_products(supermarket.api_url)
        synced = 0

        for entry in feed:
            name = (entry.get("name") or "").strip() if isinstance(entry, dict) else ""
            if not name:
                logger.warning(f"Skipping nameless product in feed of {supermarket.id}")
                continue

            product = self.repo.get_product_by_name(supermarket.id, name)
            if product is None:
                product = self.repo.add(ProductModel(supermarket_id=supermarket.id, name=name))

            product.description = entry.get("description") or None
            product.price = _price(entry.get("price"))
            product.stock = _stock(entry.get("stock"))
            product.image_url = entry.get("image_url") or None
            product.category = entry.get("category") or None
            synced += 1

        self.repo.commit()
        logger.info(f"Synced {synced} products for {supermarket.id}")
        return synced

    def sync_all(self) -> Dict[str, int]:
        results = {}
        for supermarket in self.repo.list_supermarkets_with_feed():
            try:
                results[supermarket.id] = self.sync_supermarket(supermarket)
            except (RequestException, ValueError) as e:
                self.repo.rollback()
                logger.error(f"Error syncing {supermarket.id}: {e}")
                results[supermarket.id] = -1
        return results
