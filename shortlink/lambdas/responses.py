"""API Gateway (Lambda Proxy) response builders shared by the request handlers"""

import functools
import json
import logging
from collections.abc import Callable
from urllib.parse import urlencode

from shortlink.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shortlink.types import LambdaResponse
from shortlink.utils.runtime import running_locally


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None, errors: dict[str, str] | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    if errors:
        body['errors'] = errors
    return {
        'statusCode': 400,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 404,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_500(message: str | None = None, error_code: str = UNKNOWN_INTERNAL_SERVER_ERROR) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})', 'error_code': error_code}
    return {
        'statusCode': 500,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def home_location(base: str, message: str) -> str:
    """Return the home page URL carrying a user-facing notice.

    Example:
        >>> home_location('http://localhost:3000', 'This URL has expired')
        'http://localhost:3000/?message=This+URL+has+expired'
    """
    return f'{base.rstrip("/")}/?{urlencode({"message": message})}'


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator turning any unhandled handler exception into a 500 response.

    When running locally the exception is reraised instead, so stack traces
    reach the developer's terminal.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in request handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'handler': handler.__qualname__},
            )
            return response_500()

    return wrapper
