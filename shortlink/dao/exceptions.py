"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    RecordNotFoundError:
        Raised when a UrlRecord is not found in the data store.

    RecordAlreadyExistsError:
        Raised when inserting a UrlRecord whose shortcode is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, I/O).

    MalformedRecordError:
        Raised when a persisted record can't be decoded.

Example:
    >>> from shortlink.dao.exceptions import RecordNotFoundError
    >>> raise RecordNotFoundError("Short URL with code 'abc123' not found.", shortcode='abc123')
    Traceback (most recent call last):
        ...
    shortlink.dao.exceptions.RecordNotFoundError: Short URL with code 'abc123' not found.
"""

from shortlink.exceptions import ShortLinkError


class DAOError(ShortLinkError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class RecordNotFoundError(DAOError):
    """Raised when a UrlRecord is not found in the data store."""

    error_code = 'dao:record_not_found_error'

    def __init__(self, message: str, shortcode: str | None = None):
        self.shortcode = shortcode
        super().__init__(message)


class RecordAlreadyExistsError(DAOError):
    """Raised when inserting a UrlRecord whose shortcode already exists in the data store."""

    error_code = 'dao:record_already_exists_error'

    def __init__(self, message: str, shortcode: str | None = None):
        self.shortcode = shortcode
        super().__init__(message)


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and I/O failures.
    """

    error_code = 'dao:data_store_error'


class MalformedRecordError(DataStoreError):
    """Raised when a persisted record can't be decoded into a UrlRecord."""

    error_code = 'dao:malformed_record_error'
