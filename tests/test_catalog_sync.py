from decimal import Decimal

import pytest
from requests import ConnectionError as RequestsConnectionError

from storefront.data.models import ProductModel, SupermarketModel
from storefront.services.catalog_sync import CatalogSync


class FakeFeedClient:
    def __init__(self, feeds):
        self.feeds = feeds

    def fetch_products(self, api_url):
        feed = self.feeds[api_url]
        if isinstance(feed, Exception):
            raise feed
        return feed


@pytest.fixture
def markets(db):
    db.add_all(
        [
            SupermarketModel(id="s1", name="Washington", api_url="http://feed/s1"),
            SupermarketModel(id="s2", name="Paris", api_url="http://feed/s2"),
            SupermarketModel(id="s3", name="Offline"),
        ]
    )
    db.commit()


def test_sync_inserts_and_updates_by_name(db, markets):
    db.add(ProductModel(id="old", supermarket_id="s1", name="Milk", price=Decimal("1.00"), stock=1))
    db.commit()
    feed = FakeFeedClient(
        {
            "http://feed/s1": [
                {"name": "Milk", "price": 1.5, "stock": 7, "category": "dairy"},
                {"name": "Bread", "price": "2.25", "stock": None, "image_url": "http://img/b.png"},
                {"price": 3},
            ],
            "http://feed/s2": [],
        }
    )

    results = CatalogSync(db, feed).sync_all()

    assert results == {"s1": 2, "s2": 0}
    db.expire_all()
    milk = db.get(ProductModel, "old")
    assert (milk.price, milk.stock, milk.category) == (Decimal("1.50"), 7, "dairy")
    bread = db.query(ProductModel).filter_by(name="Bread").one()
    assert (bread.supermarket_id, bread.price, bread.stock) == ("s1", Decimal("2.25"), 0)


def test_one_failing_feed_does_not_stop_the_rest(db, markets):
    feed = FakeFeedClient(
        {
            "http://feed/s1": RequestsConnectionError("unreachable"),
            "http://feed/s2": [{"name": "Croissant", "price": 1, "stock": 3}],
        }
    )

    results = CatalogSync(db, feed).sync_all()

    assert results == {"s1": -1, "s2": 1}
    assert db.query(ProductModel).filter_by(supermarket_id="s2").count() == 1


def test_negative_stock_from_feed_is_floored(db, markets):
    feed = FakeFeedClient({"http://feed/s1": [{"name": "Eggs", "price": 1, "stock": -4}], "http://feed/s2": []})

    CatalogSync(db, feed).sync_all()

    assert db.query(ProductModel).filter_by(name="Eggs").one().stock == 0
