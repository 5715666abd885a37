"""JSON logging for the handlers and the engine

Call `initialize_logging()` once per process (the `shortlink.lambdas`
package does it on import) before anything is logged. Every record becomes
one JSON line on stdout, `extra` fields included:

    {"timestamp": "2025-10-15T12:00:00.000Z", "level": "INFO", "logger": "shortlink.resolver",
     "message": "Short URL record expired.", "shortcode": "promo1", "expiresAt": "2025-10-15T11:30:00+00:00"}

The level comes from LOG_LEVEL (default INFO). The AWS SDK loggers are held
at WARNING so the S3 store doesn't flood the output at DEBUG.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlink.constants import ENV


# Attributes every LogRecord carries; anything else was passed through `extra`
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))) | {'message', 'asctime'}

QUIET_LOGGERS = ('boto3', 'botocore', 's3transfer', 'urllib3')


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord and its `extra` fields as a single JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in _RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes and other non-JSON extras are rendered with str()
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    level = (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
