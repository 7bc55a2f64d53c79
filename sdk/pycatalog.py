# sdk/pycatalog.py
import os
import requests
import httpx
from typing import Optional, Dict, Any, List, Union

DEFAULT_BASE_URL = os.getenv("CATALOG_API_URL", "http://localhost:3000")


class CatalogAPIError(requests.HTTPError):
    """Non-2xx answer from the API, carrying the server's error message."""

    def __init__(self, status_code: int, message: str, response=None):
        super().__init__(f"HTTP {status_code}: {message}", response=response)
        self.status_code = status_code
        self.message = message


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return str(body)


def _checked(resp) -> Any:
    if resp.status_code >= 400:
        raise CatalogAPIError(resp.status_code, _error_message(resp), response=resp)
    return resp.json()


class CatalogClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def index(self) -> Dict[str, Any]:
        return _checked(self.session.get(f"{self.base_url}/", timeout=self.timeout))

    # Products
    def list_products(
        self,
        category: Optional[str] = None,
        min_price: Optional[Union[int, float, str]] = None,
        sort: Optional[str] = None,
        fields: Optional[Union[str, List[str]]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if category:
            params["category"] = category
        if min_price is not None:
            params["minPrice"] = min_price
        if sort:
            params["sort"] = sort
        if fields:
            params["fields"] = fields if isinstance(fields, str) else ",".join(fields)
        r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        return _checked(r)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        return _checked(r)

    def create_product(self, name: str, price: Union[int, float, str], category: str) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/api/products", json={
            "name": name, "price": price, "category": category
        }, timeout=self.timeout)
        return _checked(r)

    def update_product(self, product_id: str, **changes: Any) -> Dict[str, Any]:
        # only send the fields the caller actually set
        payload = {k: v for k, v in changes.items() if v is not None}
        r = self.session.put(f"{self.base_url}/api/products/{product_id}", json=payload, timeout=self.timeout)
        return _checked(r)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        return _checked(r)

    # Async delete (concurrency demo); returns the raw response so callers can inspect 404s
    async def delete_product_async(self, product_id: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.delete(f"{self.base_url}/api/products/{product_id}")


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Product catalog CLI")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category", help="Only products in this category")
    lp.add_argument("--min-price", help="Only products priced at least this much")
    lp.add_argument("--sort", choices=["price", "-price"], help="Sort by price")
    lp.add_argument("--fields", help="Comma-separated fields to return")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Price")
    cp.add_argument("--category", required=True, help="Product category")

    up = subparsers.add_parser("update-product", help="Change some fields of a product")
    up.add_argument("--product-id", required=True, help="ID of the product")
    up.add_argument("--name", help="New name")
    up.add_argument("--price", type=float, help="New price")
    up.add_argument("--category", help="New category")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True, help="ID of the product")

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    try:
        if args.command == "list-products":
            print(c.list_products(args.category, args.min_price, args.sort, args.fields))
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "create-product":
            print(c.create_product(args.name, args.price, args.category))
        elif args.command == "update-product":
            print(c.update_product(args.product_id, name=args.name, price=args.price, category=args.category))
        elif args.command == "delete-product":
            print(c.delete_product(args.product_id))
    except CatalogAPIError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
