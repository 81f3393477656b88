# tests/test_api.py
import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from productstore.config import ServiceConfig
from productstore.database import ProductStore
from productstore.main import create_app

NEW_PRODUCT = {"name": "Kikombe", "description": "Mug", "price": 250, "category": "Kitchen", "inStock": True}


@pytest.fixture
def client():
    return TestClient(create_app(store=ProductStore(), config=ServiceConfig()))


def test_root_greeting(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello World"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "product-store"}


def test_list_products(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 1
    assert body["limit"] == 3
    assert body["total"] == 3
    assert [p["id"] for p in body["data"]] == [1, 2, 3]
    assert body["data"][2] == {
        "id": 3, "name": "Ndula", "description": "Simbaland", "price": 1000,
        "category": "Footwear", "inStock": False,
    }


def test_list_filter_and_paginate(client):
    r = client.get("/api/products", params={"category": "FOOTWEAR"})
    assert [p["name"] for p in r.json()["data"]] == ["Ndula"]

    r = client.get("/api/products", params={"page": 2, "limit": 2})
    body = r.json()
    assert (body["page"], body["limit"], body["total"]) == (2, 2, 3)
    assert [p["name"] for p in body["data"]] == ["Ndula"]

    # junk numbers fall back instead of failing
    r = client.get("/api/products", params={"page": "x", "limit": "y"})
    assert r.status_code == 200
    assert r.json()["limit"] == 3


def test_get_product(client):
    r = client.get("/api/products/1")
    assert r.status_code == 200
    assert r.json()["name"] == "Samsung"


def test_get_product_not_found_is_plain_text(client):
    for path in ("/api/products/99", "/api/products/abc"):
        r = client.get(path)
        assert r.status_code == 404
        assert r.text == "Product not found"
        assert r.headers["content-type"].startswith("text/plain")


def test_create_product(client):
    r = client.post("/api/products", json=NEW_PRODUCT)
    assert r.status_code == 201
    assert r.json() == {"id": 4, **NEW_PRODUCT}

    r = client.get("/api/products/4")
    assert r.json()["name"] == "Kikombe"


def test_create_invalid_product(client):
    r = client.post("/api/products", json={**NEW_PRODUCT, "price": "250"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid product data format"}
    assert client.get("/api/products").json()["total"] == 3


def test_create_without_body_or_with_broken_json(client):
    r = client.post("/api/products")
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid product data format"}

    r = client.post("/api/products", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["name"] == "JSONDecodeError"
    assert err["statusCode"] == 400
    assert err["message"]
    assert client.get("/api/products").json()["total"] == 3


def test_non_finite_price_is_rejected(client):
    for token in (b"NaN", b"Infinity", b"-Infinity"):
        body = b'{"name": "x", "description": "d", "price": ' + token + b', "category": "c", "inStock": true}'
        r = client.post("/api/products", content=body, headers={"content-type": "application/json"})
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid product data format"}

        r = client.put("/api/products/1", content=body, headers={"content-type": "application/json"})
        assert r.status_code == 400

    # the store is intact and still renders
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json()["total"] == 3
    assert client.get("/api/products/search").status_code == 200


def test_update_product(client):
    r = client.put("/api/products/3", json={**NEW_PRODUCT, "inStock": False})
    assert r.status_code == 200
    assert r.json() == {"id": 3, **NEW_PRODUCT, "inStock": False}


def test_update_errors(client):
    r = client.put("/api/products/99", json=NEW_PRODUCT)
    assert r.status_code == 404
    assert r.text == "Product not found"

    # validation runs first, even for unknown ids
    r = client.put("/api/products/99", json={"name": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid product data format"}


def test_delete_product(client):
    r = client.delete("/api/products/1")
    assert r.status_code == 200
    assert r.json()["name"] == "Samsung"

    assert client.get("/api/products/1").status_code == 404
    r = client.delete("/api/products/1")
    assert r.status_code == 404
    assert r.text == "Product not found"


def test_search(client):
    r = client.get("/api/products/search", params={"name": "gen"})
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Gen Zee Chronicles"]

    r = client.get("/api/products/search")
    assert len(r.json()) == 3


def test_stats(client):
    r = client.get("/api/products/stats")
    assert r.status_code == 200
    assert r.json() == {"Nangos": 1, "Kioo Cha Jamii": 1, "Footwear": 1}


def test_unknown_route(client):
    for method, path in (("GET", "/nope"), ("PATCH", "/api/products/1"), ("POST", "/api/products/1")):
        r = client.request(method, path)
        assert r.status_code == 404
        assert r.json() == {"error": "Route not found"}


def test_internal_errors_are_wrapped():
    app = create_app(store=ProductStore(), config=ServiceConfig())

    class Teapot(Exception):
        status_code = 418

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret detail")

    @app.get("/teapot")
    async def teapot():
        raise Teapot("short and stout")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"error": {"name": "RuntimeError", "message": "Something went wrong", "statusCode": 500}}

    r = client.get("/teapot")
    assert r.status_code == 418
    assert r.json() == {"error": {"name": "Teapot", "message": "short and stout", "statusCode": 418}}


def test_apps_do_not_share_state():
    a = TestClient(create_app(store=ProductStore(), config=ServiceConfig()))
    b = TestClient(create_app(store=ProductStore(), config=ServiceConfig()))
    a.delete("/api/products/1")
    assert a.get("/api/products").json()["total"] == 2
    assert b.get("/api/products").json()["total"] == 3


def test_unseeded_app():
    client = TestClient(create_app(config=ServiceConfig(seed=False)))
    assert client.get("/api/products").json() == {"page": 1, "limit": 0, "total": 0, "data": []}
    assert client.get("/api/products/stats").json() == {}


async def _create(app, name):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.post("/api/products", json={**NEW_PRODUCT, "name": name})


def test_concurrent_creates_get_distinct_ids():
    app = create_app(store=ProductStore(), config=ServiceConfig())

    async def run():
        return await asyncio.gather(*[_create(app, f"item-{i}") for i in range(10)])

    results = asyncio.run(run())
    assert all(r.status_code == 201 for r in results)
    ids = sorted(r.json()["id"] for r in results)
    assert ids == list(range(4, 14))
