"""Abstract base class for UrlRecord data access objects (DAOs).

This class establishes a consistent contract for all record store
implementations, regardless of the underlying storage medium (process
memory, a JSON file, Redis, S3, ...).

Responsibilities:
    - Whole-collection `load()` / `save()`: the minimal contract every backend implements.
    - Keyed operations (`get`, `exists`, `insert_many`, `append_click`) with default
      implementations built on load/save. Backends may override them with native,
      more efficient operations as long as the observable semantics stay the same.
    - Serialize read-modify-write sequences so concurrent writers never lose a
      click event or observe a partially committed batch.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, timedelta, UTC
        >>> from shortlink.models import ClickEvent, UrlRecord
        >>> from shortlink.dao.memory import RecordMemoryDAO

        >>> dao = RecordMemoryDAO()
        >>> now = datetime.now(UTC)
        >>> record = UrlRecord(
        ...     original_url='https://example.com/blog/article-123',
        ...     shortcode='a1b2c3',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> dao.insert_many([record])
        <RecordMemoryDAO>

        >>> dao.append_click('a1b2c3', ClickEvent(timestamp=now))
        1

        >>> dao.get('a1b2c3').total_clicks
        1

NOTE:
    - Records are never deleted. Expiry is evaluated at read time, so an expired
      record keeps its shortcode reserved forever.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence

from beartype import beartype

from shortlink.models import ClickEvent, UrlRecord
from shortlink.dao.exceptions import RecordAlreadyExistsError, RecordNotFoundError


class RecordBaseDAO(ABC):
    """Interface for UrlRecord data access objects (DAOs).

    Methods:
        load(**kwargs) -> list[UrlRecord]:
            Return every record in insertion order.
            Raises DataStoreError on connection or read failure.

        save(records: Sequence[UrlRecord], **kwargs) -> RecordBaseDAO:
            Replace the whole collection with `records`.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> UrlRecord:
            Retrieve one record by shortcode.
            Raises RecordNotFoundError if the record does not exist.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether any record, live or expired, uses the shortcode.

        insert_many(records: Sequence[UrlRecord], **kwargs) -> RecordBaseDAO:
            Atomically add a batch of new records: either all are added or none.
            Raises RecordAlreadyExistsError if any shortcode is already taken.

        append_click(shortcode: str, click: ClickEvent, **kwargs) -> int:
            Append a click event to a record and return its new click count.
            Raises RecordNotFoundError if the record does not exist.

    Subclassing:
        Datastore-specific implementations must implement `load()` and `save()`
        and call `super().__init__()`. The default keyed operations hold
        `self._lock` across their load-modify-save sequence.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f'<{type(self).__name__}>'

    @abstractmethod
    def load(self, **kwargs) -> list[UrlRecord]:
        """Return every stored record in insertion order.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordBaseDAO':
        """Replace the stored collection with `records`.

        Args:
            records (Sequence[UrlRecord]):
                The complete record collection, in insertion order.

        Returns:
            RecordBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @beartype
    def get(self, shortcode: str, **kwargs) -> UrlRecord:
        for record in self.load():
            if record.shortcode == shortcode:
                return record
        raise RecordNotFoundError(f"Short URL with code '{shortcode}' not found.", shortcode=shortcode)

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return any(record.shortcode == shortcode for record in self.load())

    @beartype
    def insert_many(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordBaseDAO':
        """Atomically insert a batch of new records.

        Raises:
            RecordAlreadyExistsError:
                If a shortcode is already stored or repeated within the batch.
                Nothing is inserted in that case.
            DataStoreError:
                If there is an error in the data store.
        """
        with self._lock:
            existing = self.load()
            taken = {record.shortcode for record in existing}
            for record in records:
                if record.shortcode in taken:
                    raise RecordAlreadyExistsError(
                        f"Short URL with code '{record.shortcode}' already exists.", shortcode=record.shortcode
                    )
                taken.add(record.shortcode)
            self.save([*existing, *records])
        return self

    @beartype
    def append_click(self, shortcode: str, click: ClickEvent, **kwargs) -> int:
        """Append a click event to the record identified by `shortcode`.

        Returns:
            int: the record's click count after the append.

        Raises:
            RecordNotFoundError:
                If no record with this shortcode exists.
            DataStoreError:
                If there is an error in the data store.
        """
        with self._lock:
            records = self.load()
            for index, record in enumerate(records):
                if record.shortcode == shortcode:
                    records[index] = record.with_click(click)
                    self.save(records)
                    return records[index].total_clicks
        raise RecordNotFoundError(f"Short URL with code '{shortcode}' not found.", shortcode=shortcode)
