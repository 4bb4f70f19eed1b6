from storefront.data.models import ProductModel
from storefront.repos.product_repo import ProductRepo


def _stock(db, product_id="p1"):
    db.expire_all()
    return db.get(ProductModel, product_id).stock


def test_decrement_refuses_more_than_available(db, make_product):
    make_product("p1", 1, 2)
    repo = ProductRepo(db)

    assert repo.decrement_stock("p1", 3) == 0
    repo.commit()

    assert _stock(db) == 2


def test_decrement_can_take_the_last_unit_but_not_more(db, make_product):
    make_product("p1", 1, 2)
    repo = ProductRepo(db)

    assert repo.decrement_stock("p1", 2) == 1
    assert repo.decrement_stock("p1", 1) == 0
    repo.commit()

    assert _stock(db) == 0


def test_decrement_unknown_product_affects_nothing(db, make_product):
    make_product("p1", 1, 2)

    assert ProductRepo(db).decrement_stock("ghost", 1) == 0
    assert _stock(db) == 2


def test_batched_read_is_scoped_to_supermarket(db, make_product):
    make_product("p1", 1, 2)
    make_product("p2", 1, 2)

    found = ProductRepo(db).get_products_by_ids("s1", ["p1", "p2", "ghost"])
    assert sorted(p.id for p in found) == ["p1", "p2"]
    assert ProductRepo(db).get_products_by_ids("other", ["p1"]) == []
