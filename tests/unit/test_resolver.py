"""Unit tests for shortcode resolution

Test coverage includes:

1. Redirect outcome
   - Ensures a live shortcode redirects to its original URL and records exactly one click.
   - Ensures the click carries the given source and location, or the defaults.

2. NotFound outcome
   - Ensures unknown and malformed shortcodes are not found and the store is left untouched.

3. Expired outcome
   - Ensures records are expired exactly at their expiry time and no click is recorded.
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from shortlink.models import ClickEvent, Expired, NotFound, Redirect
from shortlink.dao.base import RecordBaseDAO
from shortlink.resolver import resolve


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def promo(store, make_record):
    record = make_record(shortcode='promo1', original_url='https://example.com', validity_minutes=30)
    store.insert_many([record])
    return record


# -------------------------------
# 1. Redirect outcome
# -------------------------------


@freeze_time('2025-10-15 12:10:00')
def test_resolve_live_shortcode(store, promo):
    outcome = resolve('promo1', store)

    assert outcome == Redirect(shortcode='promo1', target_url='https://example.com')
    assert outcome.redirect is True
    assert store.get('promo1').clicks == (ClickEvent(timestamp=datetime(2025, 10, 15, 12, 10, tzinfo=UTC)),)


@freeze_time('2025-10-15 12:10:00')
def test_resolve_records_source_and_location(store, promo):
    resolve('promo1', store, source='https://news.example.org', location='DE')

    click, = store.get('promo1').clicks
    assert click.source == 'https://news.example.org'
    assert click.location == 'DE'


@freeze_time('2025-10-15 12:10:00')
def test_resolve_twice_records_two_clicks(store, promo):
    resolve('promo1', store)
    resolve('promo1', store)

    assert store.get('promo1').total_clicks == 2


# -------------------------------
# 2. NotFound outcome
# -------------------------------


def test_resolve_unknown_shortcode(store, promo):
    outcome = resolve('zzzz99', store)

    assert outcome == NotFound(shortcode='zzzz99')
    assert outcome.message == 'Invalid or expired URL'
    assert store.get('promo1').total_clicks == 0


@pytest.mark.parametrize('shortcode', ['ab', 'abc!def', '', 'a' * 13])
def test_resolve_malformed_shortcode_skips_store(shortcode):
    store = MagicMock(spec=RecordBaseDAO)

    assert resolve(shortcode, store) == NotFound(shortcode=shortcode)
    store.get.assert_not_called()
    store.append_click.assert_not_called()


# -------------------------------
# 3. Expired outcome
# -------------------------------


@pytest.mark.parametrize('moment', ['2025-10-15 12:30:00', '2025-10-16 00:00:00'])
def test_resolve_expired_shortcode(store, promo, moment):
    with freeze_time(moment):
        outcome = resolve('promo1', store)

    assert outcome == Expired(shortcode='promo1', expired_at=promo.expires_at)
    assert outcome.message == 'This URL has expired'
    assert store.get('promo1').total_clicks == 0


def test_resolve_just_before_expiry(store, promo):
    with freeze_time(promo.expires_at - timedelta(microseconds=1)):
        assert isinstance(resolve('promo1', store), Redirect)
