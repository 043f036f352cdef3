from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Column bounds: price is NUMERIC(10, 2), stock a 32-bit INTEGER
PRICE_DIGITS = 10
PRICE_PLACES = 2
STOCK_MIN = -(2 ** 31)
STOCK_MAX = 2 ** 31 - 1

class ProductCreate(BaseModel):
    # Required fields are checked by the command layer so that a missing
    # field is reported the same way as a non-positive price.
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES)
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=STOCK_MIN, le=STOCK_MAX)

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES)
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=STOCK_MIN, le=STOCK_MAX)

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category: str
    stock: int
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

class ProductListResponse(BaseModel):
    products: List[ProductOut]
    pagination: Pagination

class ProductSearchResponse(BaseModel):
    products: List[ProductOut]

class MessageResponse(BaseModel):
    message: str

class ImageUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")

class HealthResponse(BaseModel):
    status: str
    service: str
    database: str
    timestamp: datetime
