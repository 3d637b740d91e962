# catalog_store/main.py
from fastapi import FastAPI, HTTPException, File, UploadFile, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
import logging, uuid
from pathlib import PurePath
from typing import Optional, Dict, Any, Tuple

from catalog_sdk.models import Category
from catalog_store.database import PRODUCTS, UPLOADS, reset

logger = logging.getLogger(__name__)

app = FastAPI(title="catalog-store (in-memory dev store)")

from fastapi.middleware.cors import CORSMiddleware

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Pydantic schemas
# ---------------------------
class ProductFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = None
    subcategory: Optional[str] = None
    price: Optional[str] = None
    original_price: Optional[str] = Field(default=None, alias="originalPrice")
    offer_price: Optional[str] = Field(default=None, alias="offerPrice")
    badge: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    image: Optional[str] = None
    available_quantity: Optional[int] = Field(default=None, alias="availableQuantity", ge=0)

class ProductIn(ProductFields):
    title: str = Field(min_length=1)
    category: Category

class ProductPatch(ProductFields):
    title: Optional[str] = Field(default=None, min_length=1)
    category: Optional[Category] = None

# ---------------------------
# Helpers
# ---------------------------
def _find(product_id: str, category: Optional[Category]) -> Tuple[str, Dict[str, Any]]:
    buckets = [category] if category else list(PRODUCTS)
    for cat in buckets:
        p = PRODUCTS[cat].get(product_id)
        if p is not None:
            return cat, p
    raise HTTPException(status_code=404, detail="product not found")

def _upload_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})

# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/products")
async def list_products():
    return {cat: list(bucket.values()) for cat, bucket in PRODUCTS.items()}

@app.post("/products", status_code=201)
async def create_product(payload: ProductIn):
    pid = uuid.uuid4().hex
    product = {"id": pid, **payload.model_dump(by_alias=True, exclude_none=True)}
    PRODUCTS[payload.category][pid] = product
    logger.info("created %s in %s", pid, payload.category)
    return product

@app.put("/products/{product_id}")
async def update_product(product_id: str, payload: ProductPatch, category: Optional[Category] = None):
    current, product = _find(product_id, category)
    changes = payload.model_dump(by_alias=True, exclude_unset=True)
    for key, value in changes.items():
        if value is not None:
            product[key] = value
        elif key not in ("title", "category"):
            # an explicit null clears an optional field
            product.pop(key, None)
    # a category change moves the product between lists
    if product["category"] != current:
        del PRODUCTS[current][product_id]
        PRODUCTS[product["category"]][product_id] = product
    return product

@app.delete("/products/{product_id}")
async def delete_product(product_id: str, category: Optional[Category] = None):
    current, product = _find(product_id, category)
    del PRODUCTS[current][product_id]
    return product

# ---------------------------
# Image host
# ---------------------------
@app.post("/upload")
async def upload_image(request: Request, image: UploadFile = File(...)):
    content = await image.read()
    if not content:
        return _upload_error("Uploaded file is empty")
    if not (image.content_type or "").startswith("image/"):
        return _upload_error("Only image files are allowed")
    name = uuid.uuid4().hex + PurePath(image.filename or "").suffix
    UPLOADS[name] = {"content": content, "content_type": image.content_type}
    return {"url": str(request.url_for("get_upload", filename=name))}

@app.get("/uploads/{filename}", name="get_upload")
async def get_upload(filename: str):
    stored = UPLOADS.get(filename)
    if not stored:
        raise HTTPException(status_code=404, detail="image not found")
    return Response(content=stored["content"], media_type=stored["content_type"])

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    reset()
    return {"status": "reset"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=4000)
