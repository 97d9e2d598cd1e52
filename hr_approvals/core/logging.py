import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from pythonjsonlogger import jsonlogger
from contextvars import ContextVar

from hr_approvals.core.config import settings

# Correlation id of the request being served; empty outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per line, tagged with service, environment and request id."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        log_record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment

def setup_logging(level: Optional[Union[int, str]] = None):
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)
    # The app module may be imported more than once under test runners
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers):
        return
    log_handler = logging.StreamHandler()
    log_handler.setFormatter(CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(log_handler)

    # Request lines come from LoggingMiddleware; SQL echo stays off
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
