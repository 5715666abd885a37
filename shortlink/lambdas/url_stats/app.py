import logging

from shortlink.constants import SHORT_URL_NOT_FOUND
from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.exceptions import RecordNotFoundError
from shortlink.service import default_service
from shortlink.utils.helpers import base_url, get_short_url
from shortlink.lambdas.responses import guarantee_500_response, response_200, response_404


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for link statistics

    Statistics are a pure read: no click is recorded while rendering them.
    With a 'shortcode' path parameter a single record is returned, otherwise
    every record in store order.

    HTTP responses:
        200: Statistics
            stats: list of records (or a single record) with their click history
        404: Not found
            message: no record with the requested shortcode
        500: Internal server error
    """
    service = default_service()
    public_base = base_url(event, default=service.base_url)

    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode:
        try:
            stats = service.record_statistics(shortcode)
        except RecordNotFoundError:
            logger.info(
                'Short URL record not found in database. Responding with 404.',
                extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
            )
            return response_404(message=f"short url {get_short_url(shortcode, public_base)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
        return response_200({'stats': {**stats.to_dict(), 'shortUrl': get_short_url(stats.shortcode, public_base)}})

    rows = service.statistics()
    logger.debug('Collected statistics for %d record(s).', len(rows))
    return response_200({'stats': [{**row.to_dict(), 'shortUrl': get_short_url(row.shortcode, public_base)} for row in rows]})
