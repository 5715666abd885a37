"""JSON file record store

Persists the whole record collection as one JSON array, the same document
the original browser client kept under its `shortenedUrls` storage key, so
exported client data can be loaded as-is.

Writes go to a temporary file in the target directory which then replaces
the document with `os.replace()`, so readers never observe a half-written
collection.
"""

import os
import json
import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path

from beartype import beartype

from shortlink.models import UrlRecord
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.exceptions import DataStoreError, MalformedRecordError


logger = logging.getLogger(__name__)


class RecordFileDAO(RecordBaseDAO):
    """Record store backed by a local JSON document.

    Args:
        path (str | os.PathLike):
            Location of the JSON document. Parent directories are created on first save.
            A missing document reads as an empty collection.

    Example:
        >>> dao = RecordFileDAO(path='data/records.json')
        >>> dao.load()
        []
    """

    def __init__(self, path: str | os.PathLike, **kwargs):
        super().__init__(**kwargs)
        self.path = Path(path)

    def __repr__(self) -> str:
        return f'<RecordFileDAO path={str(self.path)!r}>'

    def load(self, **kwargs) -> list[UrlRecord]:
        with self._lock:
            try:
                with self.path.open(encoding='utf-8') as f:
                    document = json.load(f)
            except FileNotFoundError:
                return []
            except json.JSONDecodeError as e:
                raise MalformedRecordError(f'Record file {self.path} is not valid JSON.') from e
            except OSError as e:
                raise DataStoreError(f"Can't read record file {self.path}.") from e

        if not isinstance(document, list):
            raise MalformedRecordError(f'Record file {self.path} must contain a JSON array.')

        try:
            return [UrlRecord.from_dict(item) for item in document]
        except ValueError as e:
            raise MalformedRecordError(f'Record file {self.path} contains a malformed record.') from e

    @beartype
    def save(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordFileDAO':
        payload = json.dumps([record.to_dict() for record in records], indent=2)

        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f'.{self.path.name}.', suffix='.tmp')
                try:
                    with os.fdopen(fd, 'w', encoding='utf-8') as f:
                        f.write(payload)
                    os.replace(tmp_path, self.path)
                except BaseException:
                    os.unlink(tmp_path)
                    raise
            except OSError as e:
                raise DataStoreError(f"Can't write record file {self.path}.") from e

        logger.debug('Saved record file.', extra={'path': str(self.path), 'records': len(records)})
        return self
