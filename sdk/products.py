# sdk/products.py
import requests
import httpx
from typing import Any, Dict, Optional


class ProductAPIError(Exception):
    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


def _decode(r) -> Any:
    # not-found responses are plain text, everything else is JSON
    try:
        return r.json()
    except ValueError:
        return r.text


def _check(r) -> Any:
    body = _decode(r)
    if r.status_code >= 400:
        raise ProductAPIError(r.status_code, body)
    return body


def _product_payload(name: str, description: str, price: float, category: str, in_stock: bool) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "inStock": in_stock,
    }


class ProductClient:
    """
    Thin client for the product store HTTP API.

    `session` may be any requests-compatible session (a FastAPI TestClient
    works too); `transport` is handed to httpx for the async methods.
    """

    def __init__(self, base_url: str = "http://localhost:3000", timeout: int = 10,
                 session=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.transport = transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def greeting(self) -> str:
        r = self.session.get(self._url("/"), timeout=self.timeout)
        if r.status_code >= 400:
            raise ProductAPIError(r.status_code, r.text)
        return r.text

    def health(self):
        return _check(self.session.get(self._url("/health"), timeout=self.timeout))

    # Queries
    def list_products(self, category: Optional[str] = None, page: Optional[int] = None,
                      limit: Optional[int] = None):
        params = {}
        if category:
            params["category"] = category
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        r = self.session.get(self._url("/api/products"), params=params, timeout=self.timeout)
        return _check(r)

    def get_product(self, product_id: int):
        return _check(self.session.get(self._url(f"/api/products/{product_id}"), timeout=self.timeout))

    def search_products(self, name: Optional[str] = None):
        params = {"name": name} if name else {}
        r = self.session.get(self._url("/api/products/search"), params=params, timeout=self.timeout)
        return _check(r)

    def stats(self) -> Dict[str, int]:
        return _check(self.session.get(self._url("/api/products/stats"), timeout=self.timeout))

    # Mutations
    def create_product(self, name: str, description: str, price: float, category: str, in_stock: bool = True):
        payload = _product_payload(name, description, price, category, in_stock)
        r = self.session.post(self._url("/api/products"), json=payload, timeout=self.timeout)
        return _check(r)

    def update_product(self, product_id: int, name: str, description: str, price: float,
                       category: str, in_stock: bool):
        payload = _product_payload(name, description, price, category, in_stock)
        r = self.session.put(self._url(f"/api/products/{product_id}"), json=payload, timeout=self.timeout)
        return _check(r)

    def delete_product(self, product_id: int):
        return _check(self.session.delete(self._url(f"/api/products/{product_id}"), timeout=self.timeout))

    # Async variants
    def _async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def list_products_async(self, category: Optional[str] = None, page: Optional[int] = None,
                                  limit: Optional[int] = None):
        params = {k: v for k, v in (("category", category), ("page", page), ("limit", limit)) if v}
        async with self._async_client() as client:
            r = await client.get("/api/products", params=params)
        return _check(r)

    async def get_product_async(self, product_id: int):
        async with self._async_client() as client:
            r = await client.get(f"/api/products/{product_id}")
        return _check(r)

    async def create_product_async(self, name: str, description: str, price: float, category: str,
                                   in_stock: bool = True):
        payload = _product_payload(name, description, price, category, in_stock)
        async with self._async_client() as client:
            r = await client.post("/api/products", json=payload)
        return _check(r)
