"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record is rendered as a single JSON line on stdout, so CloudWatch Logs
Insights can filter on `event`, `shortcode` etc. directly. Keyword `extra`
fields are copied verbatim into the JSON object. While a Lambda invocation is
in flight, its AWS request id is attached as `requestId`.

Logging format:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkshortener.lambdas.redirect_url.app",
    "message": "Redirecting client to target URL. Responding with 302.",
    "requestId": "c6af9ac6-7b61-11e6-9a41-93e812345678",
    "shortcode": "1C",
    "event": "REDIRECT_SUCCESS"
}
"""

import os
import json
import logging
import logging.config
from contextvars import ContextVar, Token
from datetime import datetime, UTC

from linkshortener.constants import ENV


_request_id: ContextVar[str | None] = ContextVar('request_id', default=None)


def bind_request_id(request_id: str | None) -> Token:
    """Attach request_id to all records logged until the token is reset."""
    return _request_id.set(request_id)


def unbind_request_id(token: Token) -> None:
    _request_id.reset(token)


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    # Attributes every LogRecord carries; anything else came in through `extra`
    RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime'}

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

        request_id = _request_id.get()
        if request_id is not None:
            log['requestId'] = request_id

        log.update({key: value for key, value in vars(record).items() if key not in self.RESERVED_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Extras may hold models, exceptions etc.
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
            'loggers': {
                # botocore logs full AppConfig payloads at DEBUG
                'botocore': {'level': 'WARNING'},
                'urllib3': {'level': 'WARNING'},
            },
        }
    )
