# product_service/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Depends, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import commands, images, queries
from .config import settings
from .db import Base, engine, get_db
from .deps import add_cors, get_object_store
from .errors import CatalogError, UnavailableError
from .schemas import (
    HealthResponse,
    ImageUploadResponse,
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductSearchResponse,
    ProductUpdate,
)
from .storage import ObjectStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "product-service"

# ---------------------------------------------------------
# 🚀 Initialization
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # A database that cannot be reached here aborts startup
    Base.metadata.create_all(bind=engine)
    logger.info(f"🛍️ {SERVICE_NAME} ready")
    yield
    # uvicorn has stopped accepting requests and drained in-flight ones
    logger.info("Shutdown signal received: closing database pool")
    engine.dispose()


app = FastAPI(title="Product Catalog API", version="1.0.0", lifespan=lifespan)
add_cors(app, settings.CORS_ORIGINS)

# ---------------------------------------------------------
# ⚠️ Error responses
# ---------------------------------------------------------
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    headers = None
    if isinstance(exc, UnavailableError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

# ---------------------------------------------------------
# 🩺 Health check
# ---------------------------------------------------------
@app.get("/health", response_model=HealthResponse)
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"❌ Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        database="connected",
        timestamp=datetime.now(timezone.utc),
    )

# ---------------------------------------------------------
# 🔍 Listing + search (search is declared before /{product_id})
# ---------------------------------------------------------
@app.get("/api/products", response_model=ProductListResponse)
def list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return queries.list_products(db, page=page, limit=limit, category=category)


@app.get("/api/products/search", response_model=ProductSearchResponse)
def search_products(q: Optional[str] = None, db: Session = Depends(get_db)):
    products = queries.search_products(db, q)
    return ProductSearchResponse(products=[ProductOut.model_validate(p) for p in products])

# ---------------------------------------------------------
# 🪑 Single product CRUD
# ---------------------------------------------------------
@app.get("/api/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return queries.get_product(db, product_id)


@app.post("/api/products", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return commands.create_product(db, data)


@app.put("/api/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    return commands.update_product(db, product_id, data)


@app.delete("/api/products/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    commands.delete_product(db, product_id)
    return MessageResponse(message="Product deleted successfully")

# ---------------------------------------------------------
# 🖼️ Image upload
# ---------------------------------------------------------
@app.post("/api/products/{product_id}/image", response_model=ImageUploadResponse)
def upload_image(
    product_id: int,
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    upload = None
    if image is not None:
        upload = images.ImageUpload(
            filename=image.filename or "upload",
            content_type=image.content_type,
            body=image.file.read(),
        )
    image_url = images.attach_image(db, store, product_id, upload)
    return ImageUploadResponse(image_url=image_url)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("product_service.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
