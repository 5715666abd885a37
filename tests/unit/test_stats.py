"""Unit tests for the statistics view data supplier

Test coverage includes:

1. collect_statistics()
   - Ensures one row per record, in store order, with click totals and history.
   - Ensures collecting statistics never records a click.

2. record_statistics()
   - Ensures a single record's row is returned and unknown shortcodes raise RecordNotFoundError.
"""

from datetime import timedelta

import pytest

from shortlink.models import ClickEvent
from shortlink.dao.exceptions import RecordNotFoundError
from shortlink.stats import collect_statistics, record_statistics


@pytest.fixture
def populated_store(store, make_record, now):
    store.insert_many(
        [
            make_record(shortcode='abc123'),
            make_record(shortcode='promo1', clicks=(ClickEvent(timestamp=now), ClickEvent(timestamp=now, source='https://t.co'))),
            make_record(shortcode='old001', created_at=now - timedelta(days=2), validity_minutes=1),
        ]
    )
    return store


# -------------------------------
# 1. collect_statistics()
# -------------------------------


def test_collect_statistics(populated_store):
    rows = collect_statistics(populated_store)

    assert [row.shortcode for row in rows] == ['abc123', 'promo1', 'old001']
    assert [row.total_clicks for row in rows] == [0, 2, 0]
    assert [click.source for click in rows[1].clicks] == ['Direct', 'https://t.co']


def test_collect_statistics_is_a_pure_read(populated_store):
    before = populated_store.load()

    collect_statistics(populated_store)
    collect_statistics(populated_store)

    assert populated_store.load() == before


def test_collect_statistics_empty_store(store):
    assert collect_statistics(store) == []


# -------------------------------
# 2. record_statistics()
# -------------------------------


def test_record_statistics(populated_store):
    row = record_statistics('promo1', populated_store)

    assert row.total_clicks == 2
    assert populated_store.get('promo1').total_clicks == 2


def test_record_statistics_unknown_shortcode(populated_store):
    with pytest.raises(RecordNotFoundError):
        record_statistics('zzzz99', populated_store)
