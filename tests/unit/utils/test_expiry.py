"""Unit tests for the expiry policy

Test coverage includes:

1. parse_validity()
   - Numbers and numeric strings become floats; None and '' mean "not provided".
   - Non-numeric values, booleans and non-finite numbers raise ValueError.

2. compute_expiry()
   - Adds the validity period to the creation time.
   - Rejects non-positive validity.
   - Rejects validity that rounds to zero or overflows the datetime range.

3. is_expired()
   - Boundary: expired exactly at expires_at.
   - Defaults to the current time.
"""

from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from shortlink.utils.expiry import compute_expiry, is_expired, parse_validity


# -------------------------------
# 1. parse_validity()
# -------------------------------


@pytest.mark.parametrize(
    'value, expected',
    [
        (None, None),
        ('', None),
        (30, 30.0),
        (0.5, 0.5),
        ('45', 45.0),
        (' 1.5 ', 1.5),
        (-10, -10.0),
        ('0', 0.0),
    ],
)
def test_parse_validity(value, expected):
    assert parse_validity(value) == expected


@pytest.mark.parametrize('value', ['soon', '1e', True, False, [30], {'minutes': 30}, float('nan'), float('inf'), 'inf'])
def test_parse_validity_rejects(value):
    with pytest.raises(ValueError, match='Validity must be a number'):
        parse_validity(value)


# -------------------------------
# 2. compute_expiry()
# -------------------------------


def test_compute_expiry(now):
    assert compute_expiry(now, 30) == datetime(2025, 10, 15, 12, 30, tzinfo=UTC)
    assert compute_expiry(now, 0.5) == now + timedelta(seconds=30)


@pytest.mark.parametrize('minutes', [0, -1, -0.1])
def test_compute_expiry_rejects_non_positive(now, minutes):
    with pytest.raises(ValueError, match='Validity must be greater than 0'):
        compute_expiry(now, minutes)


@pytest.mark.parametrize('minutes', [1e-9, 1e12, 1e300])
def test_compute_expiry_rejects_out_of_range(now, minutes):
    with pytest.raises(ValueError, match='Validity is out of range'):
        compute_expiry(now, minutes)


# -------------------------------
# 3. is_expired()
# -------------------------------


def test_is_expired_boundary(now):
    expires_at = now + timedelta(minutes=30)

    assert is_expired(expires_at, now=expires_at - timedelta(microseconds=1)) is False
    assert is_expired(expires_at, now=expires_at) is True


def test_is_expired_defaults_to_current_time():
    expires_at = datetime(2025, 10, 15, 12, 30, tzinfo=UTC)

    with freeze_time('2025-10-15 12:29:59'):
        assert is_expired(expires_at) is False
    with freeze_time('2025-10-15 12:31:00'):
        assert is_expired(expires_at) is True
