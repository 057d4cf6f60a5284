"""Logging formatters for cleanup diagnostics."""

import logging


class TaskFormatter(logging.Formatter):
    """Logging formatter that prepends the task kind based on extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with task kind prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional ``[kind]`` prefix
        """
        msg = super().format(record)
        task_kind = getattr(record, "task_kind", None)

        if task_kind:
            return f"[{task_kind}] {msg}"

        return msg
