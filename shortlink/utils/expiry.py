"""Expiry policy for shortened URLs

A record expires `validity_minutes` after its creation. Expiry is evaluated
at read time: expired records stay in the store and keep their shortcode
reserved forever.

Functions:
    parse_validity(value) -> float | None
        Interpret a submitted validity period (minutes).
    compute_expiry(created_at, validity_minutes) -> datetime
        Compute the expiry timestamp of a new record.
    is_expired(expires_at, now=None) -> bool
        Check whether an expiry timestamp has been reached.

Example:
    >>> from datetime import datetime, UTC
    >>> created = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    >>> compute_expiry(created, 30)
    datetime.datetime(2025, 10, 15, 12, 30, tzinfo=datetime.timezone.utc)
    >>> is_expired(compute_expiry(created, 30), now=created)
    False
"""

import math
from datetime import datetime, timedelta, UTC
from typing import Any


def parse_validity(value: Any) -> float | None:
    """Interpret a submitted validity period in minutes.

    None and the empty string mean "not provided". Numbers and numeric strings
    are accepted; the sign is not checked here.

    Returns:
        float | None:
            The validity period in minutes, None if not provided.

    Raises:
        ValueError:
            If the value is present but isn't a finite number.

    Example:
        >>> parse_validity('45')
        45.0
        >>> parse_validity('') is None
        True
        >>> parse_validity('soon')
        Traceback (most recent call last):
            ...
        ValueError: Validity must be a number (given value: 'soon').
    """
    if value is None or value == '':
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f'Validity must be a number (given value: {value!r}).')

    try:
        minutes = float(value.strip() if isinstance(value, str) else value)
    except ValueError as e:
        raise ValueError(f'Validity must be a number (given value: {value!r}).') from e

    if not math.isfinite(minutes):
        raise ValueError(f'Validity must be a number (given value: {value!r}).')
    return minutes


def compute_expiry(created_at: datetime, validity_minutes: float) -> datetime:
    """Compute the expiry timestamp of a record created at `created_at`.

    Raises:
        ValueError:
            If the validity isn't positive, rounds to zero at microsecond
            precision or overflows the datetime range.
    """
    if validity_minutes <= 0:
        raise ValueError(f'Validity must be greater than 0 (given value: {validity_minutes}).')

    try:
        expires_at = created_at + timedelta(minutes=validity_minutes)
    except OverflowError as e:
        raise ValueError(f'Validity is out of range (given value: {validity_minutes}).') from e

    if expires_at <= created_at:
        raise ValueError(f'Validity is out of range (given value: {validity_minutes}).')
    return expires_at


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    now = now or datetime.now(UTC)
    return now >= expires_at
