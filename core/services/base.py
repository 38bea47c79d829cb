# core/services/base.py
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional, Tuple
from sqlalchemy.orm import Session

from core.config import Settings, settings as default_settings
from core.errors import ValidationError
from core.sa.models import utcnow

MAX_PAGE_SIZE = 100


def page_bounds(page: int, size: int) -> Tuple[int, int]:
    """Turn a 1-based page number and page size into (limit, offset)."""
    if page < 1:
        raise ValidationError("Page must be 1 or greater", details=[{"field": "page", "value": page}])
    if size < 1 or size > MAX_PAGE_SIZE:
        raise ValidationError(
            f"Page size must be between 1 and {MAX_PAGE_SIZE}",
            details=[{"field": "size", "value": size}]
        )
    return size, (page - 1) * size


class BaseService:
    """Holds the session, settings and clock shared by the services."""

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.session = session
        self.settings = settings or default_settings
        self.clock = clock or utcnow

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Run a block as one unit of work: commit on success, roll back on any error."""
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
