"""Log formatters for JSON and human-readable output."""

import json
import logging
from datetime import UTC, datetime

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [run=%(run_id)s] %(message)s"


class JSONFormatter(logging.Formatter):
    """Formats each record as a single JSON object per line.

    The run id set by log_run_context() is always present, "-" outside a run.
    """

    def __init__(self, environment: str = "development", service_name: str = "route-sim"):
        super().__init__()
        self.environment = environment
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", "-"),
            "service_name": self.service_name,
            "environment": self.environment,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)
