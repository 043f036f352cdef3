"""
Read side of the catalog: paginated listing, lookup by id and search.

Soft-deleted rows (``deleted_at`` set) are invisible to every query here.
"""

import logging
import math
import re
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from .errors import NotFoundError, ValidationError, dependency_errors
from .models import Product
from .schemas import Pagination, ProductListResponse, ProductOut

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
SEARCH_LIMIT = 20

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _page_param(raw: Optional[str], default: int, name: str) -> int:
    """
    Parse a paging parameter the lenient way the service always has:
    the leading integer is used ("2.5" and "2abc" both mean 2), and
    missing, zero or non-numeric values fall back to ``default``.
    Negative values are rejected instead of producing a negative OFFSET.
    """
    match = _LEADING_INT.match(raw) if raw is not None else None
    value = int(match.group(1)) if match else 0
    if value < 0:
        raise ValidationError(f"{name} must be a positive integer")
    return value or default


def _visible():
    return Product.deleted_at.is_(None)


def list_products(
    db: Session,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    category: Optional[str] = None,
) -> ProductListResponse:
    page_no = _page_param(page, DEFAULT_PAGE, "page")
    page_size = _page_param(limit, DEFAULT_LIMIT, "limit")
    offset = (page_no - 1) * page_size

    filters = [_visible()]
    if category:
        filters.append(Product.category == category)

    # Count and fetch are two independent reads; the totals are advisory
    # and may disagree with the page if rows change in between.
    with dependency_errors("fetching products"):
        rows = db.execute(
            select(Product)
            .where(*filters)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(page_size)
            .offset(offset)
        ).scalars().all()
        total = db.execute(select(func.count()).select_from(Product).where(*filters)).scalar_one()

    return ProductListResponse(
        products=[ProductOut.model_validate(p) for p in rows],
        pagination=Pagination(
            page=page_no,
            limit=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
        ),
    )


def get_product(db: Session, product_id: int) -> Product:
    with dependency_errors("fetching product"):
        product = db.execute(
            select(Product).where(Product.id == product_id, _visible())
        ).scalar_one_or_none()

    if product is None:
        logger.warning(f"Product not found: id={product_id}")
        raise NotFoundError("Product not found")
    return product


def search_products(db: Session, q: Optional[str]) -> List[Product]:
    """Case-insensitive substring match on name or description, newest first."""
    if not q:
        raise ValidationError("Search query required")

    with dependency_errors("searching products"):
        return list(
            db.execute(
                select(Product)
                .where(
                    or_(
                        Product.name.icontains(q, autoescape=True),
                        Product.description.icontains(q, autoescape=True),
                    ),
                    _visible(),
                )
                .order_by(Product.created_at.desc(), Product.id.desc())
                .limit(SEARCH_LIMIT)
            ).scalars()
        )
