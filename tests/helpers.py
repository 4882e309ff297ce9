# tests/helpers.py
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import httpx

from product_api.repositories.base import ProductRepository

BASE = "/api/products"


def _dump_response(r: httpx.Response) -> str:
    """Compact diagnostic for assertion messages."""
    try:
        j = r.json()
    except Exception:
        j = None
    snippet = (r.text or "")[:500].replace("\n", "\\n")
    return (
        f"status={r.status_code} {r.request.method} {r.request.url} "
        f"json={j!r} text='{snippet}...'"
    )


def _assert_status(r: httpx.Response, expected: int | tuple[int, ...]):
    if isinstance(expected, int):
        ok = r.status_code == expected
        exp_str = str(expected)
    else:
        ok = r.status_code in expected
        exp_str = "|".join(map(str, expected))
    assert ok, f"expected {exp_str} but got: {_dump_response(r)}"


def product_payload(
    name: Optional[str] = None,
    description: Optional[str] = "test product",
    price: float = 10.5,
    quantity: int = 1,
) -> Dict[str, Any]:
    return {
        "name": name or f"Prod_{uuid.uuid4().hex[:8]}",
        "description": description,
        "price": price,
        "quantity": quantity,
    }


def create_product(c: httpx.Client, **kwargs: Any) -> Dict[str, Any]:
    payload = product_payload(**kwargs)
    r = c.post(BASE, json=payload)
    _assert_status(r, 201)
    j = r.json()
    assert "id" in j and isinstance(j["id"], int), j
    assert j["name"] == payload["name"], j
    return j


class RepositoryDown(RuntimeError):
    pass


class BrokenRepository(ProductRepository):
    """Every call fails, as a dead database would."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise RepositoryDown("connection refused")

    find_all = _fail
    find_by_id = _fail
    save = _fail
    exists_by_id = _fail
    delete_by_id = _fail
