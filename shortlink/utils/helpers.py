"""Helper utilities shared by the engine and its handlers.

Functions:
    format_timestamp(value: datetime) -> str
        Render a datetime as a 'Z'-suffixed ISO-8601 UTC string
    parse_timestamp(value: str | datetime) -> datetime
        Parse an ISO-8601 string (or datetime) into an aware UTC datetime
    base_url(event: dict, default: str) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(shortcode: str, base: str) -> str
        Get string representation of short URL for a given shortcode

Example:
    >>> from datetime import datetime, UTC
    >>> format_timestamp(datetime(2025, 10, 15, 12, 0, tzinfo=UTC))
    '2025-10-15T12:00:00.000000Z'
    >>> parse_timestamp('2025-10-15T12:00:00.000Z')
    datetime.datetime(2025, 10, 15, 12, 0, tzinfo=datetime.timezone.utc)
    >>> get_short_url('abc123', 'http://localhost:3000/')
    'http://localhost:3000/abc123'
"""

from datetime import datetime, UTC
from typing import Any

from shortlink.constants import Defaults


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string ending with 'Z'.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    # fmt: off
    return value.astimezone(UTC) \
                .isoformat(timespec='microseconds') \
                .replace('+00:00', 'Z')
    # fmt: on


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime

    Accepts the 'Z' suffix written by JavaScript's `Date.prototype.toJSON()` as well as
    explicit offsets. Naive values are treated as UTC.

    Raises:
        ValueError:
            If the value is neither a datetime nor a parsable ISO-8601 string.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise ValueError(f'Timestamp must be an ISO-8601 string (given type: {type(value)}).')

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def base_url(event: dict[str, Any], default: str = Defaults.BASE_URL) -> str:
    """Extract public base URL from API Gateway event

    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.
    Local invocations (tests, CLI) fall back to `default`.
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        return default


def get_short_url(shortcode: str, base: str) -> str:
    return f'{base.rstrip("/")}/{shortcode}'
