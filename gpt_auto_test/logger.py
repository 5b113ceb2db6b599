"""
Structured Logging for gpt-auto-test.
Outputs JSON-formatted logs on stderr so generated source can go to stdout.
"""

import json
import sys
import logging
from datetime import datetime, timezone

# Configure package logger
logger = logging.getLogger("gpt_auto_test")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler(sys.stderr)
logger.addHandler(handler)

class JsonFormatter(logging.Formatter):
    """JSON formatter that dynamically extracts all extra fields."""

    # Standard LogRecord attributes to exclude (these are Python logging internals)
    STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
        'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
        'exc_text', 'stack_info', 'asctime', 'taskName'
    }

    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith('_'):
                try:
                    json.dumps(value)
                    log_record[key] = value
                except (TypeError, ValueError):
                    # Non-serializable (e.g., Exception objects) - convert to string
                    log_record[key] = str(value)

        return json.dumps(log_record)

handler.setFormatter(JsonFormatter())

def set_level(level):
    """Set the threshold for the package logger (name or logging constant)."""
    logger.setLevel(level)

def get_logger(component: str = "SYSTEM"):
    return AgentLogger(component)

class AgentLogger:
    def __init__(self, component):
        self.component = component
        self.logger = logging.getLogger("gpt_auto_test")

    def _log(self, level, msg, fields):
        extra = {"component": self.component}
        extra.update(fields)
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg, **kwargs):
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg, **kwargs):
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg, **kwargs):
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg, **kwargs):
        self._log(logging.ERROR, msg, kwargs)
