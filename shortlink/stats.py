"""Statistics view data supplier

Pure reads of the record store for statistics pages. Rendering statistics
never resolves a shortcode and never records a click: following a short URL
is a separate operation (`shortlink.resolver.resolve`).
"""

from shortlink.models import RecordStats
from shortlink.dao.base import RecordBaseDAO


def collect_statistics(store: RecordBaseDAO) -> list[RecordStats]:
    """Return one statistics row per record, in store order."""
    return [RecordStats.from_record(record) for record in store.load()]


def record_statistics(shortcode: str, store: RecordBaseDAO) -> RecordStats:
    """Return the statistics row of a single record.

    Raises:
        RecordNotFoundError:
            If no record with this shortcode exists.
    """
    return RecordStats.from_record(store.get(shortcode))
