import json
from datetime import datetime, UTC
from typing import cast
from urllib.parse import parse_qs, urlparse

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from shortlink.types import LambdaEvent, LambdaContext
from shortlink.lambdas.redirect_url import app
from shortlink.models import UrlRecord
from shortlink.service import ShortLinkService
from shortlink.dao.exceptions import DataStoreError
from shortlink.dao.memory import RecordMemoryDAO


@pytest.fixture
def successful_event_302() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{shortcode}',
        'pathParameters': {'shortcode': 'promo1'},
        'httpMethod': 'GET',
        'path': '/promo1',
        'headers': {'referer': 'https://news.example.org/today', 'CloudFront-Viewer-Country': 'DE'},
        'requestContext': {'domainName': 'sho.rt', 'stage': 'test'},
    })


@pytest.fixture
def bad_request_400() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{shortcode}',
        'pathParameters': {'invalid': 'path'},
        'httpMethod': 'GET',
        'path': '/promo1',
        'requestContext': {'domainName': 'sho.rt', 'stage': 'test'},
    })


def notice(response) -> str:
    location = urlparse(response['headers']['Location'])
    return parse_qs(location.query)['message'][0]


class TestRedirectUrlHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'redirect_url'})

    @pytest.fixture
    def service(self) -> ShortLinkService:
        record = UrlRecord(
            original_url='https://example.com/blog/chuck-norris-is-awesome',
            shortcode='promo1',
            created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
            expires_at=datetime(2025, 10, 15, 12, 30, tzinfo=UTC),
        )
        return ShortLinkService(RecordMemoryDAO(records=[record]))

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, context: LambdaContext, service: ShortLinkService) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'default_service', lambda: service)
        monkeypatch.setattr('shortlink.lambdas.responses.running_locally', lambda: False)

        self.context = context
        self.service = service

    @freeze_time('2025-10-15 12:10:00')
    def test_lambda_handler(self, successful_event_302: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        # Assert Lambda successfully redirects user to target URL
        assert response['statusCode'] == 302
        assert body == {}
        assert response['headers']['Location'] == 'https://example.com/blog/chuck-norris-is-awesome'

        # Assert exactly one click was recorded with the request's referrer and country
        click, = self.service.dao.get('promo1').clicks
        assert click.source == 'https://news.example.org/today'
        assert click.location == 'DE'

    @freeze_time('2025-10-15 12:10:00')
    def test_lambda_handler_without_headers(self, successful_event_302: LambdaEvent) -> None:
        del successful_event_302['headers']

        app.lambda_handler(successful_event_302, self.context)

        click, = self.service.dao.get('promo1').clicks
        assert click.source == 'Direct'
        assert click.location == 'Local'

    def test_lambda_handler_with_invalid_path_parameters(self, bad_request_400: LambdaEvent) -> None:
        response = app.lambda_handler(bad_request_400, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['message'] == "Bad Request (missing 'shortcode' in path)"
        assert body['errorCode'] == 'MISSING_SHORTCODE'

    def test_lambda_handler_with_unknown_shortcode(self, successful_event_302: LambdaEvent) -> None:
        successful_event_302['pathParameters']['shortcode'] = 'zzzz99'

        response = app.lambda_handler(successful_event_302, self.context)

        assert response['statusCode'] == 302
        assert response['headers']['Location'].startswith('https://sho.rt/?')
        assert notice(response) == 'Invalid or expired URL'
        assert self.service.dao.get('promo1').total_clicks == 0

    @freeze_time('2025-10-15 12:30:00')
    def test_lambda_handler_with_expired_shortcode(self, successful_event_302: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_302, self.context)

        assert response['statusCode'] == 302
        assert notice(response) == 'This URL has expired'
        assert self.service.dao.get('promo1').total_clicks == 0

    def test_lambda_handler_with_store_failure(self, monkeypatch: MonkeyPatch, successful_event_302: LambdaEvent) -> None:
        def failing_resolve(*args, **kwargs):
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        monkeypatch.setattr(self.service, 'resolve', failing_resolve)

        response = app.lambda_handler(successful_event_302, self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'
