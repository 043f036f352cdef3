import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from .commands import utcnow
from .errors import ValidationError, dependency_errors
from .models import Product
from .storage import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ImageUpload:
    filename: str
    content_type: Optional[str]
    body: bytes


def image_key(product_id: int, filename: str) -> str:
    """Storage key under the product's prefix; the uuid keeps same-named uploads apart."""
    return f"products/{product_id}/{uuid.uuid4()}-{filename}"


def attach_image(db: Session, store: ObjectStore, product_id: int, upload: Optional[ImageUpload]) -> str:
    if upload is None:
        raise ValidationError("No image file provided")

    key = image_key(product_id, upload.filename)
    with dependency_errors("uploading image"):
        store.put(store.bucket, key, upload.body, upload.content_type or DEFAULT_CONTENT_TYPE)

    image_url = store.url_for(key)

    # No existence or deleted_at check: the reference is written to whatever
    # row has this id, and nothing at all when there is none.
    with dependency_errors("saving image url", db):
        result = db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(image_url=image_url, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        db.commit()

    if result.rowcount == 0:
        logger.warning(f"Image uploaded for unknown product id={product_id}: {key}")
    else:
        logger.info(f"Attached image to product id={product_id}: {image_url}")
    return image_url
