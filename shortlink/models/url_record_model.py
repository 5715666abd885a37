"""Shortened URL records and the click events recorded against them.

Persisted schema (compatible with records written by the original browser client):

    {
        "originalUrl": "https://example.com/article/123",
        "shortcode": "abc123",
        "createdAt": "2025-10-15T12:00:00.000000Z",
        "expiresAt": "2025-10-15T12:30:00.000000Z",
        "clicks": [
            {"timestamp": "2025-10-15T12:05:00.000000Z", "source": "Direct", "location": "Local"}
        ]
    }

Unknown keys (e.g. the legacy "shortUrl") are ignored when reading.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from shortlink.constants import ClickDefaults
from shortlink.types import RecordDocument
from shortlink.utils.expiry import is_expired
from shortlink.utils.helpers import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class ClickEvent:
    """One resolution of a shortcode.

    Attributes:
        timestamp (datetime):
            Time of resolution (UTC).
        source (str):
            Referrer of the request, 'Direct' when unknown.
        location (str):
            Geolocation label. 'Local' placeholder when no geolocation source exists.
    """

    timestamp: datetime
    source: str = ClickDefaults.SOURCE
    location: str = ClickDefaults.LOCATION

    def to_dict(self) -> RecordDocument:
        return {
            'timestamp': format_timestamp(self.timestamp),
            'source': self.source,
            'location': self.location,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickEvent':
        try:
            return cls(
                timestamp=parse_timestamp(data['timestamp']),
                source=str(data.get('source') or ClickDefaults.SOURCE),
                location=str(data.get('location') or ClickDefaults.LOCATION),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f'Malformed click event: {data!r}') from e


@dataclass(frozen=True)
class UrlRecord:
    """Represent a shortened URL.

    Records are immutable: the only change a record ever goes through is
    gaining a click event, which produces a new record via `with_click()`.

    Attributes:
        original_url (str):
            The original long URL that the shortcode redirects to.
        shortcode (str):
            Unique short identifier of the shortened URL.
        created_at (datetime):
            Creation time (UTC).
        expires_at (datetime):
            Time after which the shortcode no longer resolves. Always later than `created_at`.
        clicks (tuple[ClickEvent, ...]):
            Click events in chronological order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> record = UrlRecord(
        ...     original_url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> record.with_click(ClickEvent(timestamp=now)).total_clicks
        1
        >>> record.total_clicks
        0
    """

    original_url: str
    shortcode: str
    created_at: datetime
    expires_at: datetime
    clicks: tuple[ClickEvent, ...] = field(default=())

    def __post_init__(self):
        if self.expires_at <= self.created_at:
            raise ValueError(f"Record '{self.shortcode}' must expire after it was created.")
        if not isinstance(self.clicks, tuple):
            object.__setattr__(self, 'clicks', tuple(self.clicks))

    @property
    def total_clicks(self) -> int:
        return len(self.clicks)

    def is_expired(self, now: datetime | None = None) -> bool:
        return is_expired(self.expires_at, now)

    def with_click(self, click: ClickEvent) -> 'UrlRecord':
        return dataclasses.replace(self, clicks=(*self.clicks, click))

    def to_dict(self) -> RecordDocument:
        return {
            'originalUrl': self.original_url,
            'shortcode': self.shortcode,
            'createdAt': format_timestamp(self.created_at),
            'expiresAt': format_timestamp(self.expires_at),
            'clicks': [click.to_dict() for click in self.clicks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'UrlRecord':
        """Build a record from its persisted form.

        Raises:
            ValueError:
                If required keys are missing or timestamps can't be parsed.
        """
        try:
            return cls(
                original_url=data['originalUrl'],
                shortcode=data['shortcode'],
                created_at=parse_timestamp(data['createdAt']),
                expires_at=parse_timestamp(data['expiresAt']),
                clicks=tuple(ClickEvent.from_dict(click) for click in data.get('clicks') or ()),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f'Malformed URL record: {data!r}') from e
