"""In-process record store

Keeps records in a Python list guarded by the base DAO lock. Intended for
tests, local development and single-process deployments where persistence
across restarts is not required.
"""

from collections.abc import Sequence

from beartype import beartype

from shortlink.models import UrlRecord
from shortlink.dao.base import RecordBaseDAO


class RecordMemoryDAO(RecordBaseDAO):
    """Record store backed by process memory.

    Example:
        >>> dao = RecordMemoryDAO()
        >>> dao.load()
        []
    """

    def __init__(self, records: Sequence[UrlRecord] = (), **kwargs):
        super().__init__(**kwargs)
        self._records: list[UrlRecord] = list(records)

    def load(self, **kwargs) -> list[UrlRecord]:
        with self._lock:
            return list(self._records)

    @beartype
    def save(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordMemoryDAO':
        with self._lock:
            self._records = list(records)
        return self
