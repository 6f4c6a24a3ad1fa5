"""Structured logging for the nonempty collections."""
import logging
import json
from typing import Optional

from .config import NonEmptyConfig, get_config

logger = logging.getLogger("nonempty")
logger.addHandler(logging.NullHandler())

_HANDLER_NAME = "nonempty-json"


# JSON formatter for structured logging
class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=repr)


def configure_logging(config: Optional[NonEmptyConfig] = None) -> logging.Logger:
    """
    Attach a stream handler to the ``nonempty`` logger.

    Safe to call repeatedly; the handler is replaced, not duplicated.
    """
    config = config or get_config()
    logger.setLevel(getattr(logging, config.log_level, logging.WARNING))

    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if config.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def log_rejection(operation: str, type_name: str, **context):
    """Log a construction that was rejected because the input was empty."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"{operation} rejected empty input", extra={
        "extra_fields": {
            "operation": operation,
            "input_type": type_name,
            **context
        }
    })


def log_spill(inline_capacity: int, length: int, new_capacity: int, spilled: bool):
    """Log a transition between inline and heap storage."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("Spilled to heap" if spilled else "Moved back inline", extra={
        "extra_fields": {
            "inline_capacity": inline_capacity,
            "length": length,
            "new_capacity": new_capacity,
            "spilled": spilled,
        }
    })


def log_precondition_violation(operation: str, detail: str, **context):
    """Log a broken precondition caught by debug checks."""
    logger.error(f"Precondition violated in {operation}: {detail}", extra={
        "extra_fields": {
            "operation": operation,
            "detail": detail[:500],
            **context
        }
    })


def log_ownership_error(kind: str, type_name: str, **context):
    """Log use of a stale view or a moved-out collection."""
    logger.warning(f"{kind} on {type_name}", extra={
        "extra_fields": {
            "kind": kind,
            "type": type_name,
            **context
        }
    })
