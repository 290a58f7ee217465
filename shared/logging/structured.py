import json
import logging
from datetime import UTC, datetime

EXTRA_FIELDS = ("service", "edge_function", "user_id", "request_id", "file_path")

# Factory in place before any setup call; each setup wraps this one only
_BASE_RECORD_FACTORY = logging.getLogRecordFactory()


class JSONFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record for log shippers.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Fields passed via 'extra' (or stamped by the record factory)
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_obj[name] = value

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_structured_logging(service_name: str, level: str = "INFO") -> None:
    """
    Configure the root logger to use JSON formatting and stamp every record
    with the service name.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace uvicorn/basicConfig handlers to avoid duplicate lines
    if root_logger.handlers:
        root_logger.handlers = []

    root_logger.addHandler(handler)

    def record_factory(*args, **kwargs):
        record = _BASE_RECORD_FACTORY(*args, **kwargs)
        if not hasattr(record, "service"):
            record.service = service_name
        return record

    logging.setLogRecordFactory(record_factory)
