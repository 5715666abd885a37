"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of RecordBaseDAO. Instead of
rewriting the whole collection for every change, it overrides the keyed
operations with native Redis commands:

    - insert_many():  WATCH the new shortcodes' keys, then write every record in one MULTI/EXEC.
    - append_click(): a single RPUSH, atomic on the server, so concurrent
                      resolutions never lose a click.
    - get()/exists(): direct key lookups.

Records carry no TTL: expiry is a read-time predicate and an expired record
keeps its shortcode reserved.

Classes:
    RecordRedisDAO:
        DAO for storing and retrieving UrlRecord in a Redis datastore.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from shortlink.models import ClickEvent, UrlRecord
    >>> from shortlink.dao.redis import RecordRedisDAO

    >>> dao = RecordRedisDAO(prefix="shortlink:dev")
    >>> now = datetime.now(UTC)
    >>> record = UrlRecord(
    ...     original_url="https://example.com/page",
    ...     shortcode="abc123",
    ...     created_at=now,
    ...     expires_at=now + timedelta(minutes=30),
    ... )
    >>> dao.insert_many([record])
    <RecordRedisDAO>

    >>> dao.append_click("abc123", ClickEvent(timestamp=now))
    1
    >>> dao.get("abc123").total_clicks
    1
"""

import json
import logging
from collections.abc import Sequence

import redis
from beartype import beartype

from shortlink.models import ClickEvent, UrlRecord
from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import DataStoreError, MalformedRecordError, RecordAlreadyExistsError, RecordNotFoundError
from shortlink.utils.helpers import format_timestamp, parse_timestamp


logger = logging.getLogger(__name__)


class RecordRedisDAO(RedisClientMixin, RecordBaseDAO):
    """Redis-based Data Access Object (DAO) for URL records

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        load(**kwargs) -> list[UrlRecord]:
            Read every record listed in the index, in insertion order.

        save(records: Sequence[UrlRecord], **kwargs) -> RecordRedisDAO:
            Replace the whole collection in a single transaction.

        get(shortcode: str, **kwargs) -> UrlRecord:
            Retrieve one record with its click history.
            Raises RecordNotFoundError when the shortcode doesn't exist.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether the shortcode was ever used.

        insert_many(records: Sequence[UrlRecord], **kwargs) -> RecordRedisDAO:
            Insert a batch of records atomically (optimistic locking with WATCH).
            Raises RecordAlreadyExistsError when any shortcode is taken.

        append_click(shortcode: str, click: ClickEvent, **kwargs) -> int:
            Append a click event and return the record's click count.
            Raises RecordNotFoundError when the shortcode doesn't exist.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    WATCH_ATTEMPTS = 10  # insert_many() gives up after this many aborted transactions

    def _write(self, pipe: redis.client.Pipeline, record: UrlRecord) -> None:
        # fmt: off
        pipe.hset(self.keys.link_key(record.shortcode), mapping={
            'original_url': record.original_url,
            'created_at': format_timestamp(record.created_at),
            'expires_at': format_timestamp(record.expires_at),
        })
        # fmt: on
        if record.clicks:
            pipe.rpush(self.keys.link_clicks_key(record.shortcode), *(json.dumps(click.to_dict()) for click in record.clicks))
        pipe.rpush(self.keys.index_key(), record.shortcode)

    def _decode(self, shortcode: str, fields: dict, clicks: list) -> UrlRecord:
        try:
            return UrlRecord(
                original_url=fields['original_url'],
                shortcode=shortcode,
                created_at=parse_timestamp(fields['created_at']),
                expires_at=parse_timestamp(fields['expires_at']),
                clicks=tuple(ClickEvent.from_dict(json.loads(click)) for click in clicks),
            )
        except (KeyError, ValueError) as e:
            raise MalformedRecordError(f"Short URL with code '{shortcode}' is malformed in Redis.") from e

    @handle_redis_connection_error
    def load(self, **kwargs) -> list[UrlRecord]:
        """Read every record in insertion order

        The index is read first; the records it lists are then fetched in a single
        transaction. Records are never removed outside `save()`, so every indexed
        shortcode resolves to a complete record.
        """
        shortcodes = self.redis.lrange(self.keys.index_key(), 0, -1)
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=True) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
                pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            results = pipe.execute()

        return [
            self._decode(shortcode, fields, clicks)
            for shortcode, fields, clicks in zip(shortcodes, results[::2], results[1::2])
        ]

    @handle_redis_connection_error
    @beartype
    def save(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordRedisDAO':
        """Replace the whole collection

        Existing records are deleted and `records` written within one MULTI/EXEC,
        so readers observe either the old or the new collection.
        """
        previous = self.redis.lrange(self.keys.index_key(), 0, -1)

        with self.redis.pipeline(transaction=True) as pipe:
            stale_keys = [key for code in previous for key in (self.keys.link_key(code), self.keys.link_clicks_key(code))]
            pipe.delete(self.keys.index_key(), *stale_keys)
            for record in records:
                self._write(pipe, record)
            pipe.execute()

        logger.debug('Replaced record collection in Redis.', extra={'records': len(records)})
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> UrlRecord:
        """Retrieve a stored record by shortcode

        Fetches the record hash and its click list in a single Redis transaction.

        Raises:
            RecordNotFoundError:
                If the record does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            UrlRecord(original_url='https://example.com', shortcode='abc123', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(self.keys.link_key(shortcode))
            pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            fields, clicks = pipe.execute()

        if not fields:
            raise RecordNotFoundError(f"Short URL with code '{shortcode}' not found.", shortcode=shortcode)

        return self._decode(shortcode, fields, clicks)

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def insert_many(self, records: Sequence[UrlRecord], **kwargs) -> 'RecordRedisDAO':
        """Insert a batch of new records atomically

        Uses optimistic locking: the link keys of the batch are WATCHed, checked
        for existence, then every record is written in one MULTI/EXEC. If another
        client touches a watched key in between, EXEC aborts and the whole check
        is retried, up to WATCH_ATTEMPTS times, so a concurrent writer can never
        claim the same shortcode.

        Raises:
            RecordAlreadyExistsError:
                If any shortcode is already stored or repeated within the batch.
            DataStoreError:
                If Redis connectivity issues occur, or if the batch keeps
                losing the race after WATCH_ATTEMPTS transactions.
        """
        if not records:
            return self

        seen = set()
        for record in records:
            if record.shortcode in seen:
                raise RecordAlreadyExistsError(
                    f"Short URL with code '{record.shortcode}' already exists.", shortcode=record.shortcode
                )
            seen.add(record.shortcode)

        # NOTE: Without WATCH, two clients may both see a shortcode as free:
        #
        #       (client 1): EXISTS <app>:links:promo1  => 0
        #       (client 2): EXISTS <app>:links:promo1  => 0
        #       (client 2): HSET <app>:links:promo1 ...
        #       (client 1): HSET <app>:links:promo1 ...  => overwrites client 2 record
        link_keys = [self.keys.link_key(record.shortcode) for record in records]
        with self.redis.pipeline() as pipe:
            for attempt in range(1, self.WATCH_ATTEMPTS + 1):
                try:
                    pipe.watch(*link_keys)
                    for record, link_key in zip(records, link_keys):
                        if pipe.exists(link_key):
                            raise RecordAlreadyExistsError(
                                f"Short URL with code '{record.shortcode}' already exists.", shortcode=record.shortcode
                            )
                    pipe.multi()
                    for record in records:
                        self._write(pipe, record)
                    pipe.execute()
                    return self
                except redis.exceptions.WatchError:
                    logger.debug(
                        'Concurrent write on watched shortcodes, retrying insert.',
                        extra={'records': len(records), 'attempt': attempt},
                    )

        raise DataStoreError(f'Batch insert aborted by concurrent writes {self.WATCH_ATTEMPTS} times in a row.')

    @handle_redis_connection_error
    @beartype
    def append_click(self, shortcode: str, click: ClickEvent, **kwargs) -> int:
        """Append a click event to a record

        RPUSH is atomic on the Redis server, so concurrent resolutions of the same
        shortcode each append their own event.

        Returns:
            int: the record's click count after the append.

        Raises:
            RecordNotFoundError:
                If no record with the given shortcode exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.append_click('abc123', ClickEvent(timestamp=datetime.now(UTC)))
            3
        """
        if not self.redis.exists(self.keys.link_key(shortcode)):
            raise RecordNotFoundError(f"Short URL with code '{shortcode}' not found.", shortcode=shortcode)

        return self.redis.rpush(self.keys.link_clicks_key(shortcode), json.dumps(click.to_dict()))
