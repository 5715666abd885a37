import json
import logging

from shortlink.constants import INVALID_SUBMISSION
from shortlink.exceptions import GenerationExhaustedError, SubmissionValidationError
from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.exceptions import DataStoreError
from shortlink.service import default_service
from shortlink.utils.helpers import base_url, format_timestamp, get_short_url
from shortlink.lambdas.responses import guarantee_500_response, response_200, response_400, response_500


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten a batch of URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract the submission batch from request body
    - Step 2: Validate and commit the whole batch (all or nothing)
    - Step 3: Respond to user with 200 success and the new short URLs

    Request body:
        {"urls": [{"longUrl": ..., "validityMinutes": ..., "shortcode": ...}, ...]}
        A single submission object is accepted as a batch of one.

    HTTP responses:
        200: Successful URL shortening
            message: success message
            results: one entry per submitted URL (shortcode, short_url, original_url, created_at, expires_at)
        400: Bad client request
            message: cause of bad request (invalid JSON or rejected submission)
            errors: validation errors keyed by '<field>-<index>'
        500: Internal server error
            message: indicate the server experienced an internal error

    Example:
        >>> event = {'body': '{"urls": [{"longUrl": "https://example.com", "shortcode": "promo1"}]}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['results'][0]['short_url']
        'http://localhost:3000/promo1'
    """
    service = default_service()

    # 1- Extract submission batch from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_SUBMISSION})
        return response_400(message='invalid JSON body', error_code=INVALID_SUBMISSION)

    if isinstance(request_body, dict) and 'urls' in request_body:
        submissions = request_body['urls']
    elif isinstance(request_body, dict) and request_body:
        submissions = [request_body]
    else:
        submissions = request_body

    if not isinstance(submissions, list) or not all(isinstance(item, dict) for item in submissions):
        logger.info('Malformed submission batch. Responding with 400.', extra={'event': INVALID_SUBMISSION})
        return response_400(message="expected 'urls' to be a list of objects", error_code=INVALID_SUBMISSION)

    # 2- Validate and commit the whole batch
    try:
        records = service.shorten(submissions)
    except SubmissionValidationError as e:
        logger.info(
            'Submission batch rejected. Responding with 400.',
            extra={'event': INVALID_SUBMISSION, 'errors': e.errors},
        )
        return response_400(message='invalid submission', error_code=INVALID_SUBMISSION, errors=e.errors)
    except (GenerationExhaustedError, DataStoreError) as e:
        logger.exception(
            'Failed to commit submission batch. Responding with 500.',
            extra={'error': e.__class__.__name__, 'reason': str(e)},
        )
        return response_500(error_code=e.error_code)

    # 3- Return successful response to user
    public_base = base_url(event, default=service.base_url)
    results = [
        {
            'shortcode': record.shortcode,
            'short_url': get_short_url(record.shortcode, public_base),
            'original_url': record.original_url,
            'created_at': format_timestamp(record.created_at),
            'expires_at': format_timestamp(record.expires_at),
        }
        for record in records
    ]
    logger.info('Shortened %d URL(s). Responding with 200.', len(results), extra={'shortcodes': [r.shortcode for r in records]})
    return response_200(
        {
            'message': f'Successfully shortened {len(results)} URL(s)',
            'results': results,
        }
    )
