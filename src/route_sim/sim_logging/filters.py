"""Log filters for run id injection."""

import logging


class DefaultRunIdFilter(logging.Filter):
    """Adds a placeholder run_id so format strings never fail.

    Records emitted inside log_run_context() already carry the real id via
    ContextFilter, which must run before this filter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = "-"
        return True
