"""Data Access Object (DAO) storing the record collection as one S3 object

The whole collection lives in a single JSON document (same schema as the
JSON file store), which maps directly onto the load/save contract. Keyed
operations use the base DAO defaults, serialized by the in-process lock.

NOTE:
    S3 offers no multi-writer locking here: run a single writer process per
    document, as the engine is designed for single-writer use.

Example:
    >>> from shortlink.dao.s3 import RecordS3DAO
    >>> dao = RecordS3DAO(s3_bucket='shortlink-data', s3_key='dev/records.json')
    >>> dao.load()
    []
"""

import os
import json
import logging
from collections.abc import Sequence
from typing import Optional

import boto3
from beartype import beartype
from botocore.exceptions import ClientError

from shortlink.constants import ENV
from shortlink.models import UrlRecord
from shortlink.types import S3Client
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.s3.helpers import handle_s3_client_error
from shortlink.dao.exceptions import MalformedRecordError


logger = logging.getLogger(__name__)

MISSING_OBJECT_CODES = frozenset({'NoSuchKey', '404'})


class RecordS3DAO(RecordBaseDAO):
    """S3-based Data Access Object (DAO) for URL records

    Args:
        s3_bucket (str):
            Bucket holding the record document.
        s3_key (str, optional):
            Object key of the record document. Defaults to 'shortlink/records.json'.
        s3_client (Optional[S3Client]):
            Optional boto3 S3 client to reuse (useful in tests).
            If None, a new client is created (pointing to LocalStack when
            LOCALSTACK_ENDPOINT is set).
        s3_endpoint_url (Optional[str]):
            Explicit endpoint URL for S3-compatible services.

    Raises:
        DataStoreError:
            From load()/save() when S3 requests fail.
    """

    def __init__(
        self,
        s3_bucket: str,
        s3_key: str = 'shortlink/records.json',
        s3_client: Optional[S3Client] = None,
        s3_endpoint_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if s3_client is None:
            endpoint_url = s3_endpoint_url or os.getenv(ENV.LocalStack.ENDPOINT) or None
            s3_client = boto3.client('s3', endpoint_url=endpoint_url)

        self.s3 = s3_client
        self.bucket = s3_bucket
        self.key = s3_key

    def __repr__(self) -> str:
        return f'<RecordS3DAO s3://{self.bucket}/{self.key}>'

    @handle_s3_client_error
    def load(self, **kwargs) -> list[UrlRecord]:
        with self._lock:
            try:
                response = self.s3.get_object(Bucket=self.bucket, Key=self.key)
            except ClientError as e:
                if e.response.get('Error', {}).get('Code') in MISSING_OBJECT_CODES:
                    logger.debug('Record document does not exist yet.', extra={'bucket': self.bucket, 'key': self.key})
                    return []
                raise
            content = response['Body'].read()

        try:
            document = json.loads(content.decode('utf-8'))
            if not isinstance(document, list):
                raise ValueError('record document must be a JSON array')
            return [UrlRecord.from_dict(item) for item in document]
        except ValueError as e:
            raise MalformedRecordError(f's3://{self.bucket}/{self.key} does not hold a valid record document.') from e

    @handle_s3_client_error
    @beartype
    def save(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordS3DAO':
        payload = json.dumps([record.to_dict() for record in records]).encode('utf-8')

        with self._lock:
            self.s3.put_object(Bucket=self.bucket, Key=self.key, Body=payload, ContentType='application/json')

        logger.debug('Saved record document to S3.', extra={'bucket': self.bucket, 'key': self.key, 'records': len(records)})
        return self
