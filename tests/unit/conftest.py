from datetime import datetime, timedelta, UTC
from collections.abc import Callable

import pytest

from shortlink.models import ClickEvent, UrlRecord
from shortlink.dao.memory import RecordMemoryDAO


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_record(now: datetime) -> Callable[..., UrlRecord]:
    """Build UrlRecord instances with sensible defaults."""

    def _make_record(
        shortcode: str = 'abc123',
        original_url: str = 'https://example.com/article/123',
        created_at: datetime | None = None,
        validity_minutes: float = 30,
        clicks: tuple[ClickEvent, ...] = (),
    ) -> UrlRecord:
        created_at = created_at or now
        return UrlRecord(
            original_url=original_url,
            shortcode=shortcode,
            created_at=created_at,
            expires_at=created_at + timedelta(minutes=validity_minutes),
            clicks=clicks,
        )

    return _make_record


@pytest.fixture
def store() -> RecordMemoryDAO:
    return RecordMemoryDAO()
