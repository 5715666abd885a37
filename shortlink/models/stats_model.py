from dataclasses import dataclass
from datetime import datetime

from shortlink.models.url_record_model import ClickEvent, UrlRecord
from shortlink.types import RecordDocument
from shortlink.utils.helpers import format_timestamp


@dataclass(frozen=True)
class RecordStats:
    """Read-only statistics row of one shortened URL."""

    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    total_clicks: int
    clicks: tuple[ClickEvent, ...]

    @classmethod
    def from_record(cls, record: UrlRecord) -> 'RecordStats':
        return cls(
            shortcode=record.shortcode,
            original_url=record.original_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            total_clicks=len(record.clicks),
            clicks=record.clicks,
        )

    def to_dict(self) -> RecordDocument:
        return {
            'shortcode': self.shortcode,
            'originalUrl': self.original_url,
            'createdAt': format_timestamp(self.created_at),
            'expiresAt': format_timestamp(self.expires_at),
            'totalClicks': self.total_clicks,
            'clicks': [click.to_dict() for click in self.clicks],
        }
