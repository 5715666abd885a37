"""Unit tests for the ShortLinkService facade

Test coverage includes:

1. Construction
   - Ensures settings are validated and out-of-range values raise BadConfigurationError.
   - Ensures from_config() builds the configured store and applies engine settings.

2. Lifecycle operations
   - Ensures shorten, resolve and statistics work end to end against one store.

3. default_service()
   - Ensures the process-wide service is built once from load_config().
"""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from shortlink import service as service_module
from shortlink.exceptions import BadConfigurationError, SubmissionValidationError
from shortlink.models import Expired, NotFound, Redirect
from shortlink.dao.file import RecordFileDAO
from shortlink.dao.memory import RecordMemoryDAO
from shortlink.service import ShortLinkService, default_service


# -------------------------------
# 1. Construction
# -------------------------------


def test_defaults():
    service = ShortLinkService(RecordMemoryDAO())

    assert service.default_validity_minutes == 30
    assert service.shortcode_length == 6
    assert service.max_generation_attempts == 1000
    assert service.base_url == 'http://localhost:3000'


@pytest.mark.parametrize(
    'kwargs, message',
    [
        ({'default_validity_minutes': 0}, 'Default validity must be a positive number'),
        ({'default_validity_minutes': '30'}, 'Default validity must be a positive number'),
        ({'default_validity_minutes': True}, 'Default validity must be a positive number'),
        ({'default_validity_minutes': 1e-9}, 'Default validity is out of range'),
        ({'default_validity_minutes': 1e12}, 'Default validity is out of range'),
        ({'shortcode_length': 3}, 'Shortcode length must be between 4 and 12'),
        ({'max_generation_attempts': 0}, 'Max generation attempts must be positive'),
        ({'base_url': 'localhost:3000'}, 'Base URL must be an absolute http'),
    ],
)
def test_invalid_settings(kwargs, message):
    with pytest.raises(BadConfigurationError, match=message):
        ShortLinkService(RecordMemoryDAO(), **kwargs)


def test_from_config(tmp_path):
    service = ShortLinkService.from_config(
        {
            'active_backend': 'file',
            'backends': {'file': {'path': str(tmp_path / 'records.json')}},
            'engine': {'default_validity_minutes': 60, 'shortcode_length': 8, 'base_url': 'https://sho.rt'},
        }
    )

    assert isinstance(service.dao, RecordFileDAO)
    assert service.default_validity_minutes == 60
    assert service.shortcode_length == 8
    assert service.short_url('promo1') == 'https://sho.rt/promo1'


def test_from_config_with_unknown_engine_setting():
    with pytest.raises(BadConfigurationError, match='Invalid engine settings'):
        ShortLinkService.from_config({'active_backend': 'memory', 'engine': {'validity': 30}})


# -------------------------------
# 2. Lifecycle operations
# -------------------------------


def test_lifecycle():
    service = ShortLinkService(RecordMemoryDAO(), default_validity_minutes=10)

    with freeze_time('2025-10-15 12:00:00'):
        promo, generated = service.shorten(
            [
                {'longUrl': 'https://example.com', 'shortcode': 'promo1'},
                {'longUrl': 'https://example.org/page'},
            ]
        )

    assert promo.expires_at - promo.created_at == timedelta(minutes=10)
    assert len(generated.shortcode) == 6

    with freeze_time('2025-10-15 12:05:00'):
        assert service.resolve('promo1', source='https://t.co') == Redirect(shortcode='promo1', target_url='https://example.com')
        assert service.resolve('zzzz99') == NotFound(shortcode='zzzz99')

    with freeze_time('2025-10-15 12:10:00'):
        assert isinstance(service.resolve('promo1'), Expired)

    rows = {row.shortcode: row for row in service.statistics()}
    assert rows['promo1'].total_clicks == 1
    assert rows['promo1'].clicks[0].source == 'https://t.co'
    assert rows[generated.shortcode].total_clicks == 0
    assert service.record_statistics('promo1').total_clicks == 1

    with pytest.raises(SubmissionValidationError):
        service.shorten([{'longUrl': 'https://example.net', 'shortcode': 'promo1'}])


def test_shorten_uses_shortcode_length():
    service = ShortLinkService(RecordMemoryDAO(), shortcode_length=12)

    record, = service.shorten([{'longUrl': 'https://example.com'}])

    assert len(record.shortcode) == 12


# -------------------------------
# 3. default_service()
# -------------------------------


def test_default_service_is_built_once(monkeypatch):
    calls = []

    def fake_load_config():
        calls.append(1)
        return {'active_backend': 'memory', 'backends': {}, 'engine': {'base_url': 'https://sho.rt'}}

    monkeypatch.setattr(service_module, 'load_config', fake_load_config)
    default_service.cache_clear()

    try:
        first = default_service()
        second = default_service()
    finally:
        default_service.cache_clear()

    assert first is second
    assert first.base_url == 'https://sho.rt'
    assert isinstance(first.dao, RecordMemoryDAO)
    assert calls == [1]
