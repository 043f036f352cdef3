# scripts/load_products.py
import sys
from decimal import Decimal, InvalidOperation

import pandas as pd
from dotenv import load_dotenv
from pydantic import ValidationError as RowError

from product_service.commands import create_product
from product_service.db import Base, SessionLocal, engine
from product_service.errors import CatalogError
from product_service.schemas import ProductCreate

# Load environment variables (optional for local dev)
load_dotenv()

COLUMNS = ["name", "description", "price", "category", "stock"]


def to_decimal(v):
    if v is None or (isinstance(v, float) and pd.isna(v)): return None
    s = str(v).replace("$", "").replace(",", "").strip()
    try: return Decimal(s)
    except InvalidOperation: return None

def to_int(v):
    if v is None or pd.isna(v): return None
    try: return int(float(v))
    except (TypeError, ValueError, OverflowError): return None

def to_text(v):
    if v is None or pd.isna(v): return None
    s = str(v).strip()
    return s or None

def row_to_product(r) -> ProductCreate:
    """Missing optional columns become None; required ones are validated on create."""
    return ProductCreate(
        name=to_text(r.get("name")),
        description=to_text(r.get("description")),
        price=to_decimal(r.get("price")),
        category=to_text(r.get("category")),
        stock=to_int(r.get("stock")),
    )

def main(csv_path: str):
    df = pd.read_csv(csv_path)
    unknown = [c for c in df.columns if c not in COLUMNS]
    if unknown:
        print(f"⚠️ Ignoring columns: {', '.join(unknown)}")

    Base.metadata.create_all(bind=engine)
    created, skipped = 0, []
    with SessionLocal() as session:
        for idx, r in df.iterrows():
            try:
                create_product(session, row_to_product(r))
                created += 1
            except CatalogError as e:
                skipped.append((idx, e.message))
            except RowError as e:
                err = e.errors()[0]
                field = ".".join(str(p) for p in err.get("loc", ()))
                skipped.append((idx, f"Invalid {field}: {err.get('msg')}"))
            except Exception as e:
                # Keep the session usable for the next row
                session.rollback()
                skipped.append((idx, f"Unexpected error: {e}"))

    for idx, reason in skipped:
        print(f"❌ Row {idx} skipped: {reason}")
    print(f"✅ {created} products created, {len(skipped)} skipped.")
    return created, skipped

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/load_products.py products.csv")
        sys.exit(1)
    main(sys.argv[1])
