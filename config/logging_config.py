"""JSON-lines logging for the preview service.

Loguru writes every record to the configured log file, one JSON object per
line. Records from the stdlib ``logging`` module (uvicorn, fastapi) are routed
through loguru, and values bound with ``logger.contextualize`` for the keys in
``_CONTEXT_KEYS`` appear as top-level fields.
"""

import json
import logging
from loguru import logger


_configured = False

# Bound context copied onto each JSON line
_CONTEXT_KEYS = ("request_id", "action", "language")


def _serialize_with_context(record) -> str:
    """Stash the JSON line in ``extra`` and return a template that prints it."""
    extra = record.get("extra", {})
    out = {
        "time": str(record["time"]),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    for key in _CONTEXT_KEYS:
        if key in extra and extra[key] is not None:
            out[key] = extra[key]
    record["extra"]["_json"] = json.dumps(out, default=str)
    return "{extra[_json]}\n"


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(log_file: str, *, force: bool = False) -> None:
    """Send all logging, stdlib included, to ``log_file`` as JSON lines.

    Later calls are no-ops unless ``force`` is set, so a reloaded app keeps
    its sinks.
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    logger.remove()

    # Each process starts with an empty log
    open(log_file, "w", encoding="utf-8").close()

    logger.add(
        log_file,
        level="DEBUG",
        format=_serialize_with_context,
        encoding="utf-8",
        mode="a",
    )

    intercept = InterceptHandler()
    logging.root.handlers = [intercept]
    logging.root.setLevel(logging.DEBUG)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
