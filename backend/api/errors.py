"""Route-boundary error handling for store calls."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

LOG = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, message: str) -> Iterator[None]:
    """Turn any unexpected failure inside the block into a generic 500 with message.

    HTTPExceptions raised inside the block (404, 400, ...) pass through unchanged.
    The failure is logged with its traceback; the client only sees message.
    """
    try:
        yield
    except HTTPException:
        raise
    except Exception as e:
        LOG.exception(message)
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from e
