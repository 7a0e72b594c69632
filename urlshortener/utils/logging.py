"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start (the CLI does
this) before any other logging is done.

Records are written to stderr, one JSON object per line by default:
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "urlshortener.services.resolve",
    "message": "Short URL resolved.",
    "shortcode": "q7XrJmNa",
    "event": "SHORT_URL_RESOLVED"
}

Set LOG_FORMAT=text for plain single-line records. Driver loggers (botocore,
pymongo, sqlalchemy) are capped at WARNING unless the root level is DEBUG.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV


DRIVER_LOGGERS = ('boto3', 'botocore', 'urllib3', 'pymongo', 'sqlalchemy.engine', 'sqlalchemy.pool')

TEXT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    # Attributes every LogRecord has; anything else was passed via `extra`
    STANDARD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec='milliseconds') \
                            .replace('+00:00', 'Z')
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update({key: value for key, value in vars(record).items() if key not in self.STANDARD_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes in `extra` are rendered with str()
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure the root logger

    Args:
        level (str | None): log level name. Defaults to $LOG_LEVEL, then INFO.
        fmt (str | None): 'json' or 'text'. Defaults to $LOG_FORMAT, then json.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    log_format = (fmt or os.getenv(ENV.App.LOG_FORMAT) or 'json').lower()
    driver_level = 'DEBUG' if log_level == 'DEBUG' else 'WARNING'

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
                'text': {'format': TEXT_FORMAT},
            },
            'handlers': {
                'stderr': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'text' if log_format == 'text' else 'json',
                    'stream': 'ext://sys.stderr',
                }
            },
            'loggers': {name: {'level': driver_level} for name in DRIVER_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stderr'],
            },
        }
    )
