# product_service/config.py

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables (optional for local dev)
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    return float(raw) if raw else None


class Settings:
    # Database
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "products_db")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")

    # Pool: 20 connections, idle ones recycled after 30s
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "20"))
    DB_POOL_IDLE_TIMEOUT: int = int(os.getenv("DB_POOL_IDLE_TIMEOUT", "30"))
    DB_POOL_TIMEOUT: float = float(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_STATEMENT_TIMEOUT_MS: Optional[float] = _optional_float("DB_STATEMENT_TIMEOUT_MS")

    # Object store for product images
    S3_BUCKET: str = os.getenv("S3_BUCKET", "product-images")
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")
    S3_ENDPOINT: str = os.getenv("S3_ENDPOINT", "s3.amazonaws.com")
    AWS_ACCESS_KEY_ID: Optional[str] = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = os.getenv("AWS_SECRET_ACCESS_KEY")
    S3_TIMEOUT: Optional[float] = _optional_float("S3_TIMEOUT")

    # Service
    PORT: int = int(os.getenv("PORT", "3002"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: List[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]

    @property
    def DATABASE_URL(self) -> str:
        url = os.getenv("DATABASE_URL")
        if url:
            return url
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def S3_PUBLIC_URL(self) -> str:
        return os.getenv("S3_PUBLIC_URL") or f"https://{self.S3_BUCKET}.s3.amazonaws.com"


settings = Settings()
