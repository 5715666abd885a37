"""Resolve shortcodes to their target URLs

`resolve()` is the only operation which mutates an existing record: a live
shortcode gains exactly one click event per resolution. Unknown and expired
shortcodes are reported without touching the store.

Example:
    >>> from shortlink.dao.memory import RecordMemoryDAO
    >>> from shortlink.submission import submit
    >>> store = RecordMemoryDAO()
    >>> _ = submit([{'longUrl': 'https://example.com', 'shortcode': 'promo1'}], store)
    >>> resolve('promo1', store)
    Redirect(shortcode='promo1', target_url='https://example.com')
    >>> resolve('zzzz99', store)
    NotFound(shortcode='zzzz99')
"""

import logging
from datetime import datetime, UTC

from shortlink.constants import ClickDefaults
from shortlink.models import ClickEvent, Expired, NotFound, Redirect, ResolutionOutcome
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.exceptions import RecordNotFoundError
from shortlink.utils.expiry import is_expired
from shortlink.utils.shortener import validate_shortcode_format


logger = logging.getLogger(__name__)


def resolve(
    shortcode: str,
    store: RecordBaseDAO,
    source: str | None = None,
    location: str | None = None,
) -> ResolutionOutcome:
    """Resolve a shortcode and record a click event

    This resolver follows this procedure:
    - Step 1: Look up the record (malformed shortcodes can't exist and are reported as not found)
    - Step 2: Report expired records without recording a click
    - Step 3: Append a click event and redirect to the original URL

    Args:
        shortcode (str):
            The shortcode to resolve.
        store (RecordBaseDAO):
            Record store holding the shortcode's record.
        source (str | None):
            Referrer of the request. Defaults to 'Direct'.
        location (str | None):
            Geolocation label of the request. Defaults to the 'Local' placeholder.

    Returns:
        ResolutionOutcome: Redirect, NotFound or Expired.

    Raises:
        DataStoreError:
            If the store fails.
    """
    if not validate_shortcode_format(shortcode):
        logger.info('Malformed shortcode requested.', extra={'shortcode': repr(shortcode)})
        return NotFound(shortcode=shortcode)

    try:
        record = store.get(shortcode)
    except RecordNotFoundError:
        logger.info('Short URL record not found.', extra={'shortcode': shortcode})
        return NotFound(shortcode=shortcode)

    now = datetime.now(UTC)
    if is_expired(record.expires_at, now):
        logger.info('Short URL record expired.', extra={'shortcode': shortcode, 'expiresAt': record.expires_at.isoformat()})
        return Expired(shortcode=shortcode, expired_at=record.expires_at)

    click = ClickEvent(
        timestamp=now,
        source=source or ClickDefaults.SOURCE,
        location=location or ClickDefaults.LOCATION,
    )
    try:
        total_clicks = store.append_click(shortcode, click)
    except RecordNotFoundError:  # pragma: no cover
        logger.warning(
            'Short URL record disappeared before the click was recorded.',
            extra={'shortcode': shortcode, 'reason': 'Possible race condition with a whole-collection save'},
        )
        return NotFound(shortcode=shortcode)

    logger.debug('Recorded click.', extra={'shortcode': shortcode, 'totalClicks': total_clicks, 'source': click.source})
    return Redirect(shortcode=shortcode, target_url=record.original_url)
