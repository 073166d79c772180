"""JSON logging for the Lambda handlers

Call `initialize_logging()` in each lambda package's `__init__.py`, before the
handler module logs anything. Every line is one JSON object: the fixed fields
below, the deployment tag, then whatever the call site passed as `extra=`.

    >>> logger.info('Short code resolved.', extra={'code': 'aB3_x9Qz', 'decision': 'ALLOWED'})
    {"timestamp": "...Z", "level": "INFO", "logger": "...", "message": "Short code resolved.",
     "service": "linktoqr:dev", "code": "aB3_x9Qz", "decision": "ALLOWED"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linktoqr.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}


def service_tag() -> str | None:
    """'<APP_NAME>:<APP_ENV>' of the running deployment, None outside one."""
    app_name = os.environ.get(ENV.App.APP_NAME)
    app_env = os.environ.get(ENV.App.APP_ENV)
    if not app_name:
        return None
    return f'{app_name}:{app_env}' if app_env else app_name


class JsonFormatter(logging.Formatter):
    """Render LogRecords, extras included, as single-line JSON"""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds')
        log = {
            'timestamp': timestamp.replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if self.service:
            log['service'] = self.service

        log.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Send JSON lines at LOG_LEVEL (default INFO) to stdout, where Lambda ships them to CloudWatch."""
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter, 'service': service_tag()}},
            'handlers': {'stdout': {'class': 'logging.StreamHandler', 'formatter': 'json', 'stream': 'ext://sys.stdout'}},
            'root': {'level': os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper(), 'handlers': ['stdout']},
        }
    )
