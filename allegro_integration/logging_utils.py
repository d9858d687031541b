"""Logging setup for audit records."""

import json
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AuditFormatter(logging.Formatter):
    """Formatter that appends a record's audit context as JSON."""

    def __init__(self, fmt: Optional[str] = LOG_FORMAT, indent: Optional[int] = None):
        super().__init__(fmt)
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "audit", None)
        if context is None:
            return message

        try:
            rendered = json.dumps(context, indent=self.indent, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            # Fallback to repr if the context is not serializable
            rendered = f"{context!r} (JSON serialization failed: {e})"
        return f"{message} | {rendered}"


def configure_logging(level: int = logging.INFO, audit_level: Optional[int] = None) -> logging.Logger:
    """Configure root logging and return the audit logger.

    Args:
        level: Root logging level.
        audit_level: Level of the ``allegro_integration.audit.records``
            logger. Defaults to ``level``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(AuditFormatter())
    logging.basicConfig(level=level, handlers=[handler])

    audit_logger = logging.getLogger("allegro_integration.audit.records")
    audit_logger.setLevel(audit_level if audit_level is not None else level)
    return audit_logger
