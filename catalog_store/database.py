from typing import Dict, Any

# This file holds the in-memory catalog and uploaded images of the dev store.

PRODUCTS: Dict[str, Dict[str, Dict[str, Any]]] = {"accessories": {}, "gifts": {}}
UPLOADS: Dict[str, Dict[str, Any]] = {}


def reset() -> None:
    for bucket in PRODUCTS.values():
        bucket.clear()
    UPLOADS.clear()
