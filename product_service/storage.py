import io
import logging
from typing import Optional

import urllib3
from minio import Minio
from minio.credentials import ChainedProvider, EnvAWSProvider, IamAwsProvider, Provider

from .config import settings

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    S3-compatible object store for product images.
    Wraps the MinIO client, which also speaks to AWS S3 when pointed at
    ``s3.amazonaws.com`` with a region.
    """

    def __init__(self, client: Minio, bucket: str, public_url: str):
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> str:
        """Upload ``body`` under ``bucket/key`` and return the object's etag."""
        logger.debug(f"Uploading object: {bucket}/{key} ({len(body)} bytes)")
        result = self.client.put_object(
            bucket_name=bucket,
            object_name=key,
            data=io.BytesIO(body),
            length=len(body),
            content_type=content_type,
        )
        logger.info(f"✅ Uploaded object: {bucket}/{key}")
        return result.etag

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"


def _http_client(timeout: Optional[float]) -> Optional[urllib3.PoolManager]:
    # None keeps the MinIO default client (no per-call timeout of our own)
    if not timeout:
        return None
    return urllib3.PoolManager(
        timeout=urllib3.Timeout(connect=timeout, read=timeout),
        retries=urllib3.Retry(total=5, backoff_factor=0.2, status_forcelist=[500, 502, 503, 504]),
    )


def _credentials(access_key: Optional[str], secret_key: Optional[str]) -> Optional[Provider]:
    # Explicit keys win; otherwise follow the AWS chain (env, then instance role)
    if access_key and secret_key:
        return None
    return ChainedProvider([EnvAWSProvider(), IamAwsProvider()])


def build_object_store() -> ObjectStore:
    client = Minio(
        endpoint=settings.S3_ENDPOINT,
        access_key=settings.AWS_ACCESS_KEY_ID,
        secret_key=settings.AWS_SECRET_ACCESS_KEY,
        credentials=_credentials(settings.AWS_ACCESS_KEY_ID, settings.AWS_SECRET_ACCESS_KEY),
        region=settings.AWS_REGION,
        secure=True,
        http_client=_http_client(settings.S3_TIMEOUT),
    )
    return ObjectStore(client, bucket=settings.S3_BUCKET, public_url=settings.S3_PUBLIC_URL)
