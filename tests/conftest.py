"""Shared fixtures: an in-process dev store and a recording fake of the catalog client."""

import itertools

import pytest
from fastapi.testclient import TestClient

from admin_console.controller import CatalogController
from admin_console.session import AdminSession
from catalog_sdk.client import CatalogClient, CatalogError
from catalog_sdk.models import Product
from catalog_store.database import reset
from catalog_store.main import app

PASSWORD = "s3cret"


class FakeCatalog:
    """Stands in for CatalogClient and records every call made to it."""

    def __init__(self):
        self.calls = []
        self.remote = {"accessories": [], "gifts": []}
        self.fail = set()
        self.upload_url = "https://img.example/uploaded.png"
        self.hooks = {}
        self._ids = itertools.count(1)

    def _call(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.hooks:
            self.hooks[op]()
        if op in self.fail:
            raise CatalogError("HTTP 500")

    def ops(self):
        return [c[0] for c in self.calls]

    def list(self):
        self._call("list")
        return {k: list(v) for k, v in self.remote.items()}

    def create(self, payload):
        self._call("create", payload)
        product = Product.model_validate({"id": f"p{next(self._ids)}", **payload})
        self.remote[product.category].append(product)
        return product

    def update(self, product_id, category, payload):
        self._call("update", product_id, category, payload)
        return Product.model_validate({"id": product_id, "category": category, "title": "x", **payload})

    def delete(self, product_id, category=None):
        self._call("delete", product_id, category)
        for bucket in self.remote.values():
            for p in list(bucket):
                if p.id == product_id:
                    bucket.remove(p)
                    return p
        return Product(id=product_id, title="gone", category=category or "gifts")

    def upload_image(self, file_bytes, filename="image", content_type="application/octet-stream"):
        self._call("upload", filename)
        return self.upload_url


@pytest.fixture
def fake():
    return FakeCatalog()


@pytest.fixture
def session(tmp_path):
    return AdminSession(tmp_path / "session.json")


@pytest.fixture
def controller(fake, session):
    """A logged-in controller whose initial load has been cleared from the call log."""
    c = CatalogController(fake, session, PASSWORD)
    assert c.login(PASSWORD)
    fake.calls.clear()
    return c


@pytest.fixture
def store():
    reset()
    yield TestClient(app)
    reset()


@pytest.fixture
def client(store):
    return CatalogClient(base_url="http://testserver", session=store)


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "ring.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path
