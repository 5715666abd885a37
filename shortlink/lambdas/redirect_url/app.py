import logging

from shortlink.constants import MISSING_SHORTCODE, SHORT_URL_NOT_FOUND, SHORT_URL_EXPIRED, REDIRECT_SUCCESS
from shortlink.models import Expired, Redirect
from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.service import default_service
from shortlink.utils.helpers import base_url
from shortlink.lambdas.responses import guarantee_500_response, home_location, response_302, response_400


logger = logging.getLogger(__name__)


def _header(event: LambdaEvent, name: str) -> str | None:
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value or None
    return None


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode (a live link records one click)
    - Step 3: Redirect client to target URL, or home with a notice

    The click source is the request's Referer header ('Direct' if absent) and
    the click location is CloudFront's viewer country header ('Local' if absent).

    HTTP responses:
        302: Redirect
            headers:
                Location: target URL, or home page '/?message=...' for unknown and expired links
        400: Bad client request
            message: missing shortcode in path parameters
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'promo1'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com'
    """
    service = default_service()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Resolve the shortcode
    outcome = service.resolve(
        shortcode,
        source=_header(event, 'Referer'),
        location=_header(event, 'CloudFront-Viewer-Country'),
    )

    # 3- Redirect client
    if isinstance(outcome, Redirect):
        logger.info(
            'Redirecting client to target URL. Responding with 302.',
            extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
        )
        return response_302(location=outcome.target_url)

    event_code = SHORT_URL_EXPIRED if isinstance(outcome, Expired) else SHORT_URL_NOT_FOUND
    logger.info(
        'Short URL can not be followed. Redirecting client home with 302.',
        extra={'shortcode': shortcode, 'event': event_code},
    )
    return response_302(location=home_location(base_url(event, default=service.base_url), outcome.message))
