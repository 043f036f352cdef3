"""
Write side of the catalog: create, partial update and soft delete.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session

from .errors import NotFoundError, ValidationError, dependency_errors
from .models import Product
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_new_product(data: ProductCreate) -> None:
    if _blank(data.name) or data.price is None or _blank(data.category):
        raise ValidationError("Missing required fields: name, price, category")
    if data.price <= 0:
        raise ValidationError("Price must be greater than 0")


def create_product(db: Session, data: ProductCreate) -> Product:
    validate_new_product(data)

    now = utcnow()
    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        category=data.category,
        stock=data.stock or 0,
        created_at=now,
        updated_at=now,
    )
    with dependency_errors("creating product", db):
        db.add(product)
        db.commit()
        db.refresh(product)

    logger.info(f"Created product id={product.id} name='{product.name}'")
    return product


def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    """
    Merge the given fields into a live product. Fields left out (or sent as
    null) keep their stored value. Price is not re-checked here.
    """
    changes = data.model_dump(exclude_none=True)

    with dependency_errors("updating product", db):
        product = db.execute(
            update(Product)
            .where(Product.id == product_id, Product.deleted_at.is_(None))
            .values(**changes, updated_at=utcnow())
            .returning(Product)
        ).scalar_one_or_none()
        if product is None:
            raise NotFoundError("Product not found")
        db.commit()

    logger.info(f"Updated product id={product_id} fields={sorted(changes)}")
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Soft delete: stamp ``deleted_at`` on a live product, never remove the row."""
    with dependency_errors("deleting product", db):
        deleted_id = db.execute(
            update(Product)
            .where(Product.id == product_id, Product.deleted_at.is_(None))
            .values(deleted_at=utcnow())
            .returning(Product.id)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()
        if deleted_id is None:
            raise NotFoundError("Product not found")
        db.commit()

    logger.info(f"Soft-deleted product id={product_id}")
