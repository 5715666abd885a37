"""Build the configured record store

The active backend and its options come from the configuration document
(see `shortlink.utils.config`):

    active_backend: redis
    backends:
      redis: {host: localhost, port: 6379, db: 0}

Backend options are passed through to the DAO constructor with the DAO's
parameter prefix, e.g. `host` becomes `redis_host`.
"""

import logging
from collections.abc import Callable

from shortlink.constants import Backend
from shortlink.exceptions import BadConfigurationError
from shortlink.types import Configuration
from shortlink.dao.base import RecordBaseDAO
from shortlink.utils.config import app_prefix


logger = logging.getLogger(__name__)


def _memory_dao(options: dict) -> RecordBaseDAO:
    from shortlink.dao.memory import RecordMemoryDAO

    return RecordMemoryDAO(**options)


def _file_dao(options: dict) -> RecordBaseDAO:
    from shortlink.dao.file import RecordFileDAO

    if 'path' not in options:
        raise BadConfigurationError("The 'file' backend requires a 'path' option.")
    return RecordFileDAO(**options)


def _redis_dao(options: dict) -> RecordBaseDAO:
    from shortlink.dao.redis import RecordRedisDAO

    options = dict(options)
    prefix = options.pop('prefix', app_prefix())
    return RecordRedisDAO(**{f'redis_{k}': v for k, v in options.items()}, prefix=prefix)


def _s3_dao(options: dict) -> RecordBaseDAO:
    from shortlink.dao.s3 import RecordS3DAO

    if 'bucket' not in options:
        raise BadConfigurationError("The 's3' backend requires a 'bucket' option.")
    return RecordS3DAO(**{f's3_{k}': v for k, v in options.items()})


BUILDERS: dict[str, Callable[[dict], RecordBaseDAO]] = {
    Backend.MEMORY: _memory_dao,
    Backend.FILE: _file_dao,
    Backend.REDIS: _redis_dao,
    Backend.S3: _s3_dao,
}


def build_dao(config: Configuration) -> RecordBaseDAO:
    """Construct the record store selected by `config['active_backend']`

    Raises:
        BadConfigurationError:
            If the backend is unknown or its options don't match the DAO's parameters.
        DataStoreError:
            If the backend is unreachable at construction time (e.g. Redis healthcheck).
    """
    backend = config.get('active_backend', Backend.MEMORY)
    options = dict((config.get('backends') or {}).get(backend) or {})

    try:
        builder = BUILDERS[backend]
    except KeyError:
        raise BadConfigurationError(f"Unsupported backend '{backend}'.") from None

    try:
        dao = builder(options)
    except TypeError as e:
        raise BadConfigurationError(f"Invalid options for the '{backend}' backend: {e}") from e

    logger.debug('Built record store.', extra={'backend': str(backend), 'dao': repr(dao)})
    return dao
