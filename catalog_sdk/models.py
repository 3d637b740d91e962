# catalog_sdk/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal, Tuple, Dict

Category = Literal["accessories", "gifts"]

CATEGORIES: Tuple[str, ...] = ("accessories", "gifts")

# Fixed per-category vocabularies; not fetched from the store
SUBCATEGORIES: Dict[str, Tuple[str, ...]] = {
    "accessories": ("earrings", "necklaces", "rings", "bracelets", "hair-accessories", "bags"),
    "gifts": ("hampers", "candles", "home-decor", "personalised", "stationery"),
}


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    description: Optional[str] = None
    category: Category
    subcategory: Optional[str] = None
    price: Optional[str] = None
    original_price: Optional[str] = Field(default=None, alias="originalPrice")
    offer_price: Optional[str] = Field(default=None, alias="offerPrice")
    badge: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    image: Optional[str] = None
    available_quantity: Optional[int] = Field(default=None, alias="availableQuantity", ge=0)


def resolve_image(product: Product) -> Optional[str]:
    """
    Authoritative image reference of a product.

    Precedence: ``imageUrl`` when non-empty, then the legacy ``image`` field.
    Returns None when neither is set.
    """
    if product.image_url:
        return product.image_url
    if product.image:
        return product.image
    return None


def resolve_prices(product: Product) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (current, original) prices for display.

    ``original`` is only given when an offer price is being shown against it.
    """
    if product.offer_price:
        return product.offer_price, product.original_price or None
    return product.original_price or product.price or None, None


def quantity_label(product: Product) -> str:
    if product.category != "accessories":
        return "-"
    if product.available_quantity is None:
        return "unlimited"
    return str(product.available_quantity)
