# admin_console/reconciler.py
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any

from catalog_sdk.client import CatalogClient, CatalogError
from catalog_sdk.models import Product, CATEGORIES, SUBCATEGORIES, resolve_image
from admin_console.errors import ValidationError, ImageUploadError

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "title", "description", "price", "original_price", "offer_price",
    "badge", "available_quantity",
)


@dataclass
class Draft:
    """The single in-progress edit; every field is kept as typed."""
    title: str = ""
    description: str = ""
    category: str = "accessories"
    subcategory: str = ""
    price: str = ""
    original_price: str = ""
    offer_price: str = ""
    badge: str = ""
    image_url: str = ""
    available_quantity: str = ""
    image_file: Optional[Path] = None
    uploading: bool = False
    editing: Optional[Product] = field(default=None, repr=False)


class FormReconciler:
    def __init__(self, client: CatalogClient):
        self.client = client
        self.draft = Draft()

    @property
    def editing_id(self) -> Optional[str]:
        return self.draft.editing.id if self.draft.editing else None

    # ---------------------------
    # Draft edits
    # ---------------------------
    def set_field(self, name: str, value: str) -> None:
        if name not in TEXT_FIELDS:
            raise ValueError(f"not a text field: {name}")
        setattr(self.draft, name, value)

    def set_category(self, category: str) -> None:
        if category and category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")
        self.draft.category = category
        # vocabularies differ per category
        self.draft.subcategory = ""

    def set_subcategory(self, subcategory: str) -> None:
        if subcategory and subcategory not in SUBCATEGORIES.get(self.draft.category, ()):
            raise ValidationError(f"'{subcategory}' is not a {self.draft.category or 'known'} subcategory")
        self.draft.subcategory = subcategory

    def select_file(self, path) -> None:
        self.draft.image_file = Path(path) if path else None
        if path:
            self.draft.image_url = ""

    def set_image_url(self, url: str) -> None:
        self.draft.image_url = url
        if url:
            self.draft.image_file = None

    def begin_edit(self, product: Product) -> None:
        subcategory = product.subcategory or ""
        if subcategory not in SUBCATEGORIES[product.category]:
            subcategory = ""
        # image inputs start blank: blank means keep the existing image
        self.draft = Draft(
            title=product.title,
            description=product.description or "",
            category=product.category,
            subcategory=subcategory,
            price=product.price or "",
            original_price=product.original_price or "",
            offer_price=product.offer_price or "",
            badge=product.badge or "",
            available_quantity="" if product.available_quantity is None else str(product.available_quantity),
            editing=product,
        )

    def cancel(self) -> None:
        self.draft = Draft()

    # ---------------------------
    # Submit
    # ---------------------------
    def _quantity(self) -> Optional[int]:
        d = self.draft
        if d.category != "accessories" or not d.available_quantity.strip():
            return None
        try:
            qty = int(d.available_quantity.strip())
        except ValueError:
            raise ValidationError("Available quantity must be a whole number")
        if qty < 0:
            raise ValidationError("Available quantity cannot be negative")
        return qty

    def validate(self) -> None:
        """Presence checks only; never touches the network."""
        d = self.draft
        if not d.title.strip():
            raise ValidationError("Title required")
        if not d.category:
            raise ValidationError("Category required")
        if d.category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {d.category}")
        if d.subcategory and d.subcategory not in SUBCATEGORIES[d.category]:
            raise ValidationError(f"'{d.subcategory}' is not a {d.category} subcategory")
        self._quantity()
        if d.image_file is None and not d.image_url.strip():
            if d.editing is None or resolve_image(d.editing) is None:
                raise ValidationError("Please provide an image (upload file or enter URL)")

    def resolve_image(self) -> str:
        """
        Final image reference for the submit.

        Order: uploaded file, then typed URL, then (when editing) the
        product's existing image.
        """
        d = self.draft
        if d.image_file is not None:
            return self._upload(d.image_file)
        if d.image_url.strip():
            return d.image_url.strip()
        existing = resolve_image(d.editing) if d.editing else None
        if existing:
            return existing
        raise ValidationError("Please provide an image (upload file or enter URL)")

    def _upload(self, path: Path) -> str:
        self.draft.uploading = True
        try:
            content = path.read_bytes()
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            url = self.client.upload_image(content, path.name, content_type)
        except (OSError, CatalogError) as e:
            raise ImageUploadError(f"Image upload failed: {e}") from e
        finally:
            self.draft.uploading = False
        logger.info("Uploaded %s -> %s", path.name, url)
        return url

    def build_payload(self, image_ref: str) -> Dict[str, Any]:
        d = self.draft
        payload: Dict[str, Any] = {}

        def put(key: str, value: str):
            value = value.strip()
            if value:
                payload[key] = value

        put("title", d.title)
        put("description", d.description)
        put("category", d.category)
        put("subcategory", d.subcategory)
        # the only field sent empty: a moved product must not keep the old
        # category's subcategory
        moved = d.editing is not None and d.category != d.editing.category
        if moved and "subcategory" not in payload:
            payload["subcategory"] = None
        put("badge", d.badge)
        put("originalPrice", d.original_price)
        put("offerPrice", d.offer_price)
        # consumers reading only the legacy field still see a price
        put("price", d.price.strip() or d.original_price)
        put("imageUrl", image_ref or "")
        qty = self._quantity()
        if qty is not None:
            payload["availableQuantity"] = qty
        return payload

    def submit(self) -> Product:
        self.validate()
        image_ref = self.resolve_image()
        payload = self.build_payload(image_ref)

        editing = self.draft.editing
        if editing is not None:
            logger.info("Updating %s (%s)", editing.id, editing.category)
            product = self.client.update(editing.id, editing.category, payload)
        else:
            logger.info("Creating %s in %s", payload["title"], payload["category"])
            product = self.client.create(payload)

        self.draft = Draft()
        return product
