"""JSON logging configuration for the waitlist service."""

import json
import logging
import sys
from datetime import datetime, timezone

# Fields copied from ``extra=`` onto the log line when present
EXTRA_FIELDS = (
    "request_id", "event", "method", "path", "status_code",
    "duration_ms", "inserted_id", "error",
)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record):
        # Import here to avoid circular imports at module load time
        from waitlist.middleware.request_context import request_id_var

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": "waitlist",
            "logger": record.name,
            "message": record.getMessage(),
        }

        req_id = request_id_var.get()
        if req_id:
            log_entry["request_id"] = req_id

        for name in EXTRA_FIELDS:
            val = getattr(record, name, None)
            if val is not None:
                log_entry[name] = val

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(debug: bool = False):
    """Set up JSON-formatted logging for the entire application.

    Args:
        debug: If True, set log level to DEBUG; otherwise INFO.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Quiet noisy third-party loggers
    for name in ("pymongo", "httpx", "httpcore", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)
