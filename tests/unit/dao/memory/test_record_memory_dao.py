"""Unit tests for RecordMemoryDAO and the default RecordBaseDAO operations

Test coverage includes:

1. Whole-collection operations
   - Ensures load() returns a copy in insertion order and save() replaces the collection.

2. Keyed operations
   - Ensures get()/exists() find records, live or expired.
   - Confirms missing records raise RecordNotFoundError.
   - Ensures the store exposes only the keyed record contract.

3. Batch insertion
   - Ensures a batch is inserted all or nothing.

4. Click appends
   - Ensures append_click() records exactly one click and returns the new count.
   - Ensures concurrent appends never lose a click.
   - Ensures invalid parameter types raise type errors.
"""

import threading
from datetime import timedelta

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from shortlink.models import ClickEvent
from shortlink.dao.exceptions import RecordAlreadyExistsError, RecordNotFoundError
from shortlink.dao.memory import RecordMemoryDAO


# -------------------------------
# 1. Whole-collection operations
# -------------------------------


def test_load_returns_copy(make_record):
    dao = RecordMemoryDAO(records=[make_record(shortcode='abc123'), make_record(shortcode='promo1')])

    records = dao.load()
    records.clear()

    assert [record.shortcode for record in dao.load()] == ['abc123', 'promo1']


def test_save_replaces_collection(store, make_record):
    store.insert_many([make_record(shortcode='old001')])

    assert store.save([make_record(shortcode='new001')]) is store
    assert [record.shortcode for record in store.load()] == ['new001']


def test_repr(store):
    assert repr(store) == '<RecordMemoryDAO>'


# -------------------------------
# 2. Keyed operations
# -------------------------------


def test_get(store, make_record):
    record = make_record(shortcode='promo1')
    store.insert_many([record])

    assert store.get('promo1') == record


def test_get_missing_record(store):
    with pytest.raises(RecordNotFoundError, match="'zzzz99' not found") as exc_info:
        store.get('zzzz99')

    assert exc_info.value.shortcode == 'zzzz99'


def test_exists_includes_expired_records(store, make_record, now):
    store.insert_many([make_record(shortcode='old001', created_at=now - timedelta(days=1), validity_minutes=1)])

    assert store.exists('old001') is True
    assert store.exists('abc123') is False


@pytest.mark.parametrize('name', ['insert', 'shortcodes'])
def test_store_exposes_only_record_contract(store, name):
    assert not hasattr(store, name)


# -------------------------------
# 3. Batch insertion
# -------------------------------


def test_insert_many(store, make_record):
    store.insert_many([make_record(shortcode='abc123'), make_record(shortcode='promo1')])

    assert [record.shortcode for record in store.load()] == ['abc123', 'promo1']


def test_insert_many_is_all_or_nothing(store, make_record):
    store.insert_many([make_record(shortcode='promo1')])

    with pytest.raises(RecordAlreadyExistsError) as exc_info:
        store.insert_many([make_record(shortcode='abc123'), make_record(shortcode='promo1')])

    assert exc_info.value.shortcode == 'promo1'
    assert [record.shortcode for record in store.load()] == ['promo1']


def test_insert_many_with_repeated_shortcode(store, make_record):
    with pytest.raises(RecordAlreadyExistsError):
        store.insert_many([make_record(shortcode='promo1'), make_record(shortcode='promo1')])

    assert store.load() == []


# -------------------------------
# 4. Click appends
# -------------------------------


def test_append_click(store, make_record, now):
    store.insert_many([make_record(shortcode='promo1')])

    assert store.append_click('promo1', ClickEvent(timestamp=now)) == 1
    assert store.append_click('promo1', ClickEvent(timestamp=now + timedelta(seconds=1), source='https://t.co')) == 2

    record = store.get('promo1')
    assert [click.source for click in record.clicks] == ['Direct', 'https://t.co']


def test_append_click_to_missing_record(store, now):
    with pytest.raises(RecordNotFoundError):
        store.append_click('zzzz99', ClickEvent(timestamp=now))


def test_concurrent_appends_never_lose_clicks(store, make_record, now):
    store.insert_many([make_record(shortcode='promo1')])

    def resolve_many():
        for _ in range(50):
            store.append_click('promo1', ClickEvent(timestamp=now))

    threads = [threading.Thread(target=resolve_many) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get('promo1').total_clicks == 200


def test_append_click_with_invalid_type(store, make_record):
    store.insert_many([make_record(shortcode='promo1')])

    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        store.append_click('promo1', {'timestamp': '2025-10-15T12:00:00Z'})
