"""
Error taxonomy for the catalog service.

Every error the layers raise on purpose is a ``CatalogError`` carrying the
HTTP status it maps to; the app renders them as ``{"error": message}``.
Database and object-store failures are translated at the component
boundary by ``dependency_errors`` so internal detail never reaches clients.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from minio.error import MinioException
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session
from urllib3.exceptions import HTTPError as StorageTransportError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base class for errors with a client-facing status and message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or invalid required input."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(CatalogError):
    """Identifier does not resolve to a non-deleted product."""

    status_code = 404
    default_message = "Product not found"


class DependencyError(CatalogError):
    """Database or object-store call failed. Message is always generic."""

    status_code = 500

    def __init__(self):
        super().__init__(self.default_message)


class UnavailableError(CatalogError):
    """A dependency is temporarily unavailable; the client may retry."""

    status_code = 503
    default_message = "Service unavailable"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


@contextmanager
def dependency_errors(action: str, session: Optional[Session] = None) -> Iterator[None]:
    """
    Translate persistence and storage failures raised while doing ``action``.
    When ``session`` is given it is rolled back on any failure so it stays usable.
    """
    try:
        try:
            yield
        except Exception:
            if session is not None:
                session.rollback()
            raise
    except CatalogError:
        raise
    except PoolTimeoutError as e:
        logger.warning(f"Connection pool exhausted while {action}: {e}")
        raise UnavailableError("Database busy, please retry", retry_after=1) from e
    except (SQLAlchemyError, MinioException, StorageTransportError) as e:
        logger.exception(f"Error {action}: {e}")
        raise DependencyError() from e
