"""Shortcode generation and validation utilities

This module validates submitted URLs and shortcodes and generates random,
collision-free shortcodes against a record store.

Functions:
    validate_url(candidate) -> bool
        True iff candidate is an absolute http(s) URL.
    validate_shortcode_format(code) -> bool
        True iff code is 4-12 characters of [A-Za-z0-9_-].
    is_shortcode_available(code, store) -> bool
        True iff no record (live or expired) uses the code.
    generate_shortcode(store, reserved=(), length=6, max_attempts=1000) -> str
        Generate a random base62 shortcode not yet used by the store.

Example:
    >>> from shortlink.dao.memory import RecordMemoryDAO
    >>> store = RecordMemoryDAO()
    >>> validate_url('https://example.com/article/123')
    True
    >>> validate_shortcode_format('A1_b-2C')
    True
    >>> code = generate_shortcode(store)
    >>> len(code)
    6
"""

import re
import secrets
import string
import logging
from collections.abc import Collection
from typing import Any, TYPE_CHECKING
from urllib.parse import urlparse

from shortlink.constants import Defaults, Shortcode
from shortlink.exceptions import GenerationExhaustedError

if TYPE_CHECKING:
    from shortlink.dao.base import RecordBaseDAO


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
SHORTCODE_RE = re.compile(Shortcode.PATTERN)


def validate_url(candidate: Any) -> bool:
    """Check that candidate parses as an absolute http or https URL.

    Any parse failure (malformed IPv6 host, out-of-range port, ...) or any
    scheme other than http/https makes the URL invalid.

    Example:
        >>> validate_url('http://example.com')
        True
        >>> validate_url('ftp://example.com')
        False
        >>> validate_url('example.com')
        False
    """
    if not isinstance(candidate, str) or not candidate:
        return False

    try:
        components = urlparse(candidate)
        # NOTE: accessing .port validates it and raises ValueError when out of range
        components.port
    except ValueError:
        return False

    return components.scheme in {'http', 'https'} and bool(components.hostname)


def validate_shortcode_format(code: Any) -> bool:
    """Check that code matches ^[A-Za-z0-9_-]{4,12}$

    Example:
        >>> validate_shortcode_format('abcd')
        True
        >>> validate_shortcode_format('ab')
        False
        >>> validate_shortcode_format('abc!def')
        False
    """
    return isinstance(code, str) and SHORTCODE_RE.fullmatch(code) is not None


def is_shortcode_available(code: str, store: 'RecordBaseDAO') -> bool:
    """Check that no record in the store, live or expired, uses this shortcode."""
    return not store.exists(code)


def _random_shortcode(length: int) -> str:
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def generate_shortcode(
    store: 'RecordBaseDAO',
    reserved: Collection[str] = (),
    length: int = Defaults.SHORTCODE_LENGTH,
    max_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
) -> str:
    """Generate a random shortcode which is not used yet

    Draws random base62 strings until one is neither present in the store
    nor in `reserved` (codes already claimed by the current submission batch).
    With 62^6 possible codes collisions are extremely rare, but the retry loop
    is bounded by `max_attempts` so a saturated store fails loudly instead of
    spinning forever.

    Args:
        store (RecordBaseDAO):
            Record store holding every shortcode ever created.
        reserved (Collection[str], optional):
            Additional codes that must not be returned.
        length (int, optional):
            Length of the generated code. Defaults to 6.
        max_attempts (int, optional):
            Maximum number of draws. Defaults to 1000.

    Returns:
        str: A fresh shortcode of `length` alphanumeric characters.

    Raises:
        ValueError:
            If length is outside the 4-12 shortcode format bounds or max_attempts < 1.
        GenerationExhaustedError:
            If every draw collided with an existing or reserved code.
    """
    if not Shortcode.MIN_LENGTH <= length <= Shortcode.MAX_LENGTH:
        raise ValueError(
            f'Shortcode length must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {length}).'
        )
    if max_attempts < 1:
        raise ValueError(f'Max attempts must be a positive integer (given value: {max_attempts}).')

    for attempt in range(1, max_attempts + 1):
        code = _random_shortcode(length)
        if code not in reserved and is_shortcode_available(code, store):
            if attempt > 1:
                logger.debug('Generated shortcode after %s attempts.', attempt, extra={'shortcode': code})
            return code

    logger.error('Shortcode generation exhausted.', extra={'attempts': max_attempts, 'length': length})
    raise GenerationExhaustedError(f'Unable to generate a free shortcode after {max_attempts} attempts.')
