"""Service facade bundling a record store with engine settings

Presentation layers (the request handlers in `shortlink.lambdas`, a CLI,
a web UI) talk to the engine through `ShortLinkService`:

    - shorten(requests)  -> list[UrlRecord]       (submission pipeline)
    - resolve(shortcode) -> ResolutionOutcome     (resolver, records a click)
    - statistics()       -> list[RecordStats]     (pure read)

Example:
    >>> from shortlink.dao.memory import RecordMemoryDAO
    >>> service = ShortLinkService(RecordMemoryDAO())
    >>> record, = service.shorten([{'longUrl': 'https://example.com', 'shortcode': 'promo1'}])
    >>> service.short_url(record.shortcode)
    'http://localhost:3000/promo1'
"""

import functools
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, UTC

from shortlink.constants import Defaults
from shortlink.exceptions import BadConfigurationError
from shortlink.models import RecordStats, ResolutionOutcome, SubmissionRequest, UrlRecord
from shortlink.types import Configuration
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.factory import build_dao
from shortlink.resolver import resolve
from shortlink.stats import collect_statistics, record_statistics
from shortlink.submission import submit
from shortlink.utils.config import load_config
from shortlink.utils.expiry import compute_expiry
from shortlink.utils.helpers import get_short_url
from shortlink.utils.shortener import validate_url


logger = logging.getLogger(__name__)


class ShortLinkService:
    """Shortcode lifecycle engine bound to one record store.

    Args:
        dao (RecordBaseDAO):
            Record store, injected.
        default_validity_minutes (float, optional):
            Validity applied when a submission omits it. Defaults to 30.
        shortcode_length (int, optional):
            Length of generated shortcodes. Defaults to 6.
        max_generation_attempts (int, optional):
            Draws allowed per generated shortcode. Defaults to 1000.
        base_url (str, optional):
            Public base URL used to render short URLs. Defaults to 'http://localhost:3000'.

    Raises:
        BadConfigurationError:
            If a setting is out of range.
    """

    def __init__(
        self,
        dao: RecordBaseDAO,
        default_validity_minutes: float = Defaults.VALIDITY_MINUTES,
        shortcode_length: int = Defaults.SHORTCODE_LENGTH,
        max_generation_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
        base_url: str = Defaults.BASE_URL,
    ):
        if isinstance(default_validity_minutes, bool) or not isinstance(default_validity_minutes, (int, float)) or default_validity_minutes <= 0:
            raise BadConfigurationError(f'Default validity must be a positive number (given value: {default_validity_minutes!r}).')
        try:
            compute_expiry(datetime.now(UTC), default_validity_minutes)
        except ValueError as e:
            raise BadConfigurationError(f'Default validity is out of range (given value: {default_validity_minutes!r}).') from e
        if not 4 <= shortcode_length <= 12:
            raise BadConfigurationError(f'Shortcode length must be between 4 and 12 (given value: {shortcode_length!r}).')
        if max_generation_attempts < 1:
            raise BadConfigurationError(f'Max generation attempts must be positive (given value: {max_generation_attempts!r}).')
        if not validate_url(base_url):
            raise BadConfigurationError(f'Base URL must be an absolute http(s) URL (given value: {base_url!r}).')

        self.dao = dao
        self.default_validity_minutes = default_validity_minutes
        self.shortcode_length = shortcode_length
        self.max_generation_attempts = max_generation_attempts
        self.base_url = base_url

    @classmethod
    def from_config(cls, config: Configuration) -> 'ShortLinkService':
        """Build the service and its record store from a configuration document."""
        engine = config.get('engine') or {}
        try:
            return cls(build_dao(config), **engine)
        except TypeError as e:
            raise BadConfigurationError(f'Invalid engine settings: {e}') from e

    def shorten(self, requests: Sequence[SubmissionRequest | Mapping]) -> list[UrlRecord]:
        return submit(
            requests,
            self.dao,
            default_validity_minutes=self.default_validity_minutes,
            shortcode_length=self.shortcode_length,
            max_generation_attempts=self.max_generation_attempts,
        )

    def resolve(self, shortcode: str, source: str | None = None, location: str | None = None) -> ResolutionOutcome:
        return resolve(shortcode, self.dao, source=source, location=location)

    def statistics(self) -> list[RecordStats]:
        return collect_statistics(self.dao)

    def record_statistics(self, shortcode: str) -> RecordStats:
        return record_statistics(shortcode, self.dao)

    def short_url(self, shortcode: str) -> str:
        return get_short_url(shortcode, self.base_url)


@functools.cache
def default_service() -> ShortLinkService:
    """Return the process-wide service built from `load_config()`.

    Built once per process, so handlers invoked repeatedly in a warm runtime
    share one store client.
    """
    logger.debug('Building default service from configuration.')
    return ShortLinkService.from_config(load_config())
