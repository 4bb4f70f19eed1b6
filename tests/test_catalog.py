from storefront.data.models import ProductRequestModel


def test_products_sorted_by_price_ascending_by_default(client, make_product):
    make_product("p1", 5, 1, name="Milk")
    make_product("p2", 2, 9, name="Bread")
    make_product("p3", 8, 4, name="Cheese")

    resp = client.get("/supermarkets/s1/products")

    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Bread", "Milk", "Cheese"]


def test_products_sort_options(client, make_product):
    make_product("p1", 5, 1, name="Milk")
    make_product("p2", 2, 9, name="Bread")
    make_product("p3", 8, 4, name="Cheese")

    desc = client.get("/supermarkets/s1/products", params={"sort": "priceDesc"}).json()
    by_stock = client.get("/supermarkets/s1/products", params={"sort": "stock"}).json()

    assert [p["name"] for p in desc] == ["Cheese", "Milk", "Bread"]
    assert [p["name"] for p in by_stock] == ["Bread", "Cheese", "Milk"]


def test_products_search_is_case_insensitive(client, make_product):
    make_product("p1", 5, 1, name="Whole Milk")
    make_product("p2", 2, 9, name="Bread")

    resp = client.get("/supermarkets/s1/products", params={"search": "milk"})

    assert [p["name"] for p in resp.json()] == ["Whole Milk"]


def test_products_category_filter(client, make_product):
    make_product("p1", 5, 1, name="Milk", category="dairy")
    make_product("p2", 2, 9, name="Bread", category="bakery")

    resp = client.get("/supermarkets/s1/products", params={"category": "bakery"})

    assert [p["name"] for p in resp.json()] == ["Bread"]


def test_unknown_supermarket_is_404(client, db):
    assert client.get("/supermarkets/nope/products").status_code == 404


def test_invalid_sort_is_rejected(client, supermarket):
    assert client.get("/supermarkets/s1/products", params={"sort": "name"}).status_code == 422


def test_product_request_is_stored(client, db, supermarket):
    resp = client.post("/supermarkets/s1/product-requests", json={"request": "  Gluten-free pasta "})

    assert resp.status_code == 201
    assert resp.json()["request"] == "Gluten-free pasta"
    stored = db.query(ProductRequestModel).one()
    assert (stored.supermarket_id, stored.user_id) == ("s1", "user-1")
