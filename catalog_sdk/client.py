# catalog_sdk/client.py
import logging
import requests
from pydantic import ValidationError
from typing import Optional, Dict, Any, List

from catalog_sdk.models import Product

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Any failed call to the catalog store or the image host."""


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:4000", session=None):
        self.base_url = base_url.rstrip("/")
        # anything exposing the requests.Session call surface (e.g. FastAPI's TestClient)
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method.upper(), url)
        try:
            r = getattr(self.session, method)(url, **kwargs)
        except requests.RequestException as e:
            raise CatalogError(f"Could not reach {url}: {e}") from e
        if not 200 <= r.status_code < 300:
            logger.warning("%s %s -> HTTP %s", method.upper(), url, r.status_code)
        return r

    @staticmethod
    def _json(r) -> Any:
        if not 200 <= r.status_code < 300:
            raise CatalogError(f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise CatalogError(f"Invalid JSON in response (HTTP {r.status_code})") from e

    @staticmethod
    def _product(data: Any) -> Product:
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Unexpected product in response: {e}") from e

    # Catalog
    def list(self) -> Dict[str, List[Product]]:
        data = self._json(self._request("get", "/products"))
        if not isinstance(data, dict):
            raise CatalogError("Unexpected catalog response")
        return {
            "accessories": [self._product(p) for p in data.get("accessories", [])],
            "gifts": [self._product(p) for p in data.get("gifts", [])],
        }

    def create(self, payload: Dict[str, Any]) -> Product:
        r = self._request("post", "/products", json=payload)
        return self._product(self._json(r))

    def update(self, product_id: str, category: str, payload: Dict[str, Any]) -> Product:
        r = self._request("put", f"/products/{product_id}", params={"category": category}, json=payload)
        return self._product(self._json(r))

    def delete(self, product_id: str, category: Optional[str] = None) -> Product:
        params = {}
        if category:
            params["category"] = category
        r = self._request("delete", f"/products/{product_id}", params=params)
        return self._product(self._json(r))

    # Image host
    def upload_image(self, file_bytes: bytes, filename: str = "image", content_type: str = "application/octet-stream") -> str:
        r = self._request("post", "/upload", files={"image": (filename, file_bytes, content_type)})
        if not 200 <= r.status_code < 300:
            # prefer the host's own explanation when it sends one
            try:
                message = r.json().get("error")
            except (ValueError, AttributeError):
                message = None
            raise CatalogError(message or f"HTTP {r.status_code}")
        data = self._json(r)
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise CatalogError("Upload response did not include a url")
        return url


if __name__ == "__main__":
    import argparse
    import mimetypes
    import os
    from pathlib import Path
    from rich import print

    parser = argparse.ArgumentParser(description="Catalog store client")
    parser.add_argument("--base-url", default=None, help="Catalog store URL (defaults to API_BASE)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List both categories")

    dp = subparsers.add_parser("delete-product", help="Delete a product by its ID")
    dp.add_argument("--product-id", required=True, help="ID of the product")
    dp.add_argument("--category", choices=["accessories", "gifts"], help="Category of the product")

    up = subparsers.add_parser("upload-image", help="Upload an image file and print its hosted URL")
    up.add_argument("--file", required=True, help="Path to the image")

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url or os.environ.get("API_BASE", "http://localhost:4000"))

    try:
        if args.command == "list-products":
            catalog = c.list()
            print({k: [p.model_dump(by_alias=True, exclude_none=True) for p in v] for k, v in catalog.items()})
        elif args.command == "delete-product":
            print(c.delete(args.product_id, args.category).model_dump(by_alias=True, exclude_none=True))
        elif args.command == "upload-image":
            path = Path(args.file)
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            print(c.upload_image(path.read_bytes(), path.name, content_type))
    except CatalogError as e:
        print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)
