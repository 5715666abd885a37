"""Submission pipeline: validate a batch of URLs and commit their records

A batch holds 1 to 5 submission requests. Validation collects every error of
the batch (it never stops at the first one) into a map keyed by
'<field>-<index>':

    {
        'url-0': 'URL is required',
        'validity-2': 'Validity must be greater than 0',
        'shortcode-3': 'Duplicate shortcode in form',
    }

Any error rejects the whole batch and nothing is committed. A valid batch
is committed with a single atomic `insert_many()`, so other readers never
observe a partially committed batch.

Example:
    >>> from shortlink.dao.memory import RecordMemoryDAO
    >>> store = RecordMemoryDAO()
    >>> records = submit([{'longUrl': 'https://example.com', 'shortcode': 'promo1'}], store)
    >>> records[0].shortcode
    'promo1'
    >>> submit([{'longUrl': 'https://example.com', 'shortcode': 'promo1'}], store)
    Traceback (most recent call last):
        ...
    shortlink.exceptions.SubmissionValidationError: Submission rejected with 1 error(s).
"""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime, UTC

from shortlink.constants import Defaults
from shortlink.exceptions import GenerationExhaustedError, SubmissionValidationError
from shortlink.models import SubmissionRequest, UrlRecord
from shortlink.types import SubmissionErrors
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.exceptions import RecordAlreadyExistsError
from shortlink.utils.expiry import compute_expiry, parse_validity
from shortlink.utils.shortener import (
    generate_shortcode,
    is_shortcode_available,
    validate_shortcode_format,
    validate_url,
)


logger = logging.getLogger(__name__)

# Error messages shown next to the offending form field
BATCH_SIZE = f'Submit between 1 and {Defaults.MAX_BATCH_SIZE} URLs at a time'
URL_REQUIRED = 'URL is required'
URL_INVALID = 'Invalid URL format. Must be a valid http or https URL'
VALIDITY_NOT_A_NUMBER = 'Validity must be a number'
VALIDITY_NOT_POSITIVE = 'Validity must be greater than 0'
VALIDITY_OUT_OF_RANGE = 'Validity is out of range'
SHORTCODE_INVALID = 'Shortcode must be 4-12 characters long and contain only letters, numbers, hyphens, and underscores'
SHORTCODE_TAKEN = 'This shortcode is already in use'
SHORTCODE_DUPLICATE = 'Duplicate shortcode in form'


def _as_requests(requests: Sequence[SubmissionRequest | Mapping]) -> list[SubmissionRequest]:
    return [
        request if isinstance(request, SubmissionRequest) else SubmissionRequest.from_dict(request)
        for request in requests
    ]


def _custom_shortcode(request: SubmissionRequest) -> str | None:
    return request.shortcode if isinstance(request.shortcode, str) and request.shortcode else None


def _expiry_in_range(created_at: datetime, validity_minutes: float) -> bool:
    try:
        compute_expiry(created_at, validity_minutes)
    except ValueError:
        return False
    return True


def validate_submissions(requests: Sequence[SubmissionRequest | Mapping], store: RecordBaseDAO) -> SubmissionErrors:
    """Validate a submission batch against the store.

    Returns:
        dict[str, str]: every error of the batch, empty if the batch is valid.
    """
    requests = _as_requests(requests)
    if not 1 <= len(requests) <= Defaults.MAX_BATCH_SIZE:
        return {'batch': BATCH_SIZE}

    now = datetime.now(UTC)
    errors: SubmissionErrors = {}
    for index, request in enumerate(requests):
        if request.long_url is None or request.long_url == '':
            errors[f'url-{index}'] = URL_REQUIRED
        elif not validate_url(request.long_url):
            errors[f'url-{index}'] = URL_INVALID

        try:
            validity = parse_validity(request.validity_minutes)
        except ValueError:
            errors[f'validity-{index}'] = VALIDITY_NOT_A_NUMBER
        else:
            if validity is not None and validity <= 0:
                errors[f'validity-{index}'] = VALIDITY_NOT_POSITIVE
            elif validity is not None and not _expiry_in_range(now, validity):
                errors[f'validity-{index}'] = VALIDITY_OUT_OF_RANGE

        if request.shortcode is not None and request.shortcode != '':
            if not validate_shortcode_format(request.shortcode):
                errors[f'shortcode-{index}'] = SHORTCODE_INVALID
            elif not is_shortcode_available(request.shortcode, store):
                errors[f'shortcode-{index}'] = SHORTCODE_TAKEN

    # Duplicates within the batch override any other shortcode error
    counts = Counter(code for code in map(_custom_shortcode, requests) if code)
    for index, request in enumerate(requests):
        code = _custom_shortcode(request)
        if code and counts[code] > 1:
            errors[f'shortcode-{index}'] = SHORTCODE_DUPLICATE

    return errors


def _build_records(
    requests: list[SubmissionRequest],
    store: RecordBaseDAO,
    default_validity_minutes: float,
    shortcode_length: int,
    max_generation_attempts: int,
) -> list[UrlRecord]:
    claimed = {code for code in map(_custom_shortcode, requests) if code}
    records = []
    for request in requests:
        shortcode = _custom_shortcode(request)
        if shortcode is None:
            shortcode = generate_shortcode(store, reserved=claimed, length=shortcode_length, max_attempts=max_generation_attempts)
            claimed.add(shortcode)

        validity = parse_validity(request.validity_minutes)
        if validity is None:
            validity = default_validity_minutes

        created_at = datetime.now(UTC)
        records.append(
            UrlRecord(
                original_url=request.long_url,
                shortcode=shortcode,
                created_at=created_at,
                expires_at=compute_expiry(created_at, validity),
            )
        )
    return records


def submit(
    requests: Sequence[SubmissionRequest | Mapping],
    store: RecordBaseDAO,
    default_validity_minutes: float = Defaults.VALIDITY_MINUTES,
    shortcode_length: int = Defaults.SHORTCODE_LENGTH,
    max_generation_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
    commit_attempts: int = Defaults.COMMIT_ATTEMPTS,
) -> list[UrlRecord]:
    """Validate a submission batch and atomically commit its records

    This pipeline follows this procedure:
    - Step 1: Validate the whole batch, collecting every error
    - Step 2: Resolve shortcodes (custom or generated) and validity periods
    - Step 3: Commit all records in one atomic insert

    If a shortcode gets claimed by another writer between validation and commit,
    a custom shortcode is reported as already in use; generated shortcodes are
    drawn again and the commit retried up to `commit_attempts` times.

    Args:
        requests (Sequence[SubmissionRequest | Mapping]):
            1 to 5 submission requests, as SubmissionRequest or submitted JSON objects.
        store (RecordBaseDAO):
            Record store receiving the new records.
        default_validity_minutes (float, optional):
            Validity applied when a request omits it. Defaults to 30.
        shortcode_length (int, optional):
            Length of generated shortcodes. Defaults to 6.
        max_generation_attempts (int, optional):
            Draws allowed per generated shortcode. Defaults to 1000.
        commit_attempts (int, optional):
            Commits attempted when generated shortcodes race with other writers. Defaults to 3.

    Returns:
        list[UrlRecord]: the committed records, in request order.

    Raises:
        SubmissionValidationError:
            If the batch is invalid. Nothing is committed.
        GenerationExhaustedError:
            If no free shortcode could be generated. Nothing is committed.
        DataStoreError:
            If the store fails. Nothing is committed.
    """
    requests = _as_requests(requests)

    errors = validate_submissions(requests, store)
    if errors:
        logger.info('Rejected submission batch.', extra={'batchSize': len(requests), 'errors': errors})
        raise SubmissionValidationError(errors)

    for attempt in range(1, commit_attempts + 1):
        records = _build_records(requests, store, default_validity_minutes, shortcode_length, max_generation_attempts)
        try:
            store.insert_many(records)
        except RecordAlreadyExistsError as e:
            for index, request in enumerate(requests):
                if _custom_shortcode(request) == e.shortcode:
                    logger.info(
                        'Custom shortcode claimed concurrently. Rejecting submission batch.',
                        extra={'shortcode': e.shortcode, 'index': index},
                    )
                    raise SubmissionValidationError({f'shortcode-{index}': SHORTCODE_TAKEN}) from e

            logger.warning(
                'Generated shortcode claimed concurrently. Retrying commit.',
                extra={'shortcode': e.shortcode, 'attempt': attempt},
            )
        else:
            logger.info(
                'Committed submission batch.',
                extra={'batchSize': len(records), 'shortcodes': [record.shortcode for record in records]},
            )
            return records

    raise GenerationExhaustedError(f'Unable to commit submission batch after {commit_attempts} attempts.')
