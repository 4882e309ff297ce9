# tests/test_memory_repository.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from product_api.models.product import Product
from product_api.repositories import NOT_FOUND, Found, InMemoryProductRepository


def _product(name: str = "Cup") -> Product:
    return Product(name=name, description=None, price=Decimal("2.50"), quantity=1)


def test_ids_start_at_one_and_increase():
    repo = InMemoryProductRepository()
    assert [repo.save(_product()).id for _ in range(3)] == [1, 2, 3]


def test_seeded_ids_are_not_reused():
    seeded = _product("seed")
    seeded.id = 10
    repo = InMemoryProductRepository([seeded])
    assert repo.save(_product()).id == 11


def test_lookup_is_two_case():
    repo = InMemoryProductRepository()
    saved = repo.save(_product())
    found = repo.find_by_id(saved.id)
    assert isinstance(found, Found)
    assert (found.value.id, found.value.name) == (saved.id, "Cup")
    assert repo.find_by_id(saved.id + 1) is NOT_FOUND


def test_delete_missing_is_noop():
    repo = InMemoryProductRepository([_product()])
    repo.delete_by_id(99)
    assert len(repo) == 1
    repo.delete_by_id(1)
    assert not repo.exists_by_id(1)
    assert repo.find_all() == []


def test_concurrent_saves_get_distinct_ids():
    repo = InMemoryProductRepository()
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda i: repo.save(_product(f"p{i}")).id, range(200)))
    assert sorted(ids) == list(range(1, 201))
    assert len(repo) == 200


def test_changes_without_save_are_not_stored():
    repo = InMemoryProductRepository([_product("A")])

    repo.find_by_id(1).value.name = "changed"
    repo.find_all()[0].quantity = 99

    stored = repo.find_by_id(1).value
    assert (stored.name, stored.quantity) == ("A", 1)


def test_save_keeps_callers_object_separate():
    repo = InMemoryProductRepository()
    original = _product("A")
    saved = repo.save(original)
    saved.name = "changed"
    original.name = "changed too"
    assert repo.find_by_id(saved.id).value.name == "A"
