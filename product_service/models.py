from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text
from .db import Base

class Product(Base):
    __tablename__ = "products"
    # Never hand out a rowid twice on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)

    # Set only through the image attachment flow
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)   # soft delete marker
