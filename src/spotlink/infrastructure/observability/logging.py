"""Logging setup for spotlink: correlation ids, JSON output, compact tracebacks."""

import contextvars
import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

# Hey future me, one correlation id per public Client call (a playlist context, a search).
# contextvars are copied into tasks, so the four gathered search branches log under the
# id of the call that spawned them. grep one id and you see every page fetch it caused.
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

# Third-party loggers that drown out ours at DEBUG (one line per page fetch)
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")

PACKAGE_NAME = "spotlink"


def get_correlation_id() -> str:
    """Correlation id of the current call, "" outside of one."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Tag the current context with a correlation id.

    Args:
        correlation_id: Id to use; a random UUID4 when None

    Returns:
        The id now in effect
    """
    value = correlation_id if correlation_id is not None else uuid.uuid4().hex
    correlation_id_var.set(value)
    return value


class CorrelationIdFilter(logging.Filter):
    """Stamps every record with the current correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def _exception_chain(exc: BaseException) -> list[BaseException]:
    """Chain of causes, root cause first."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain[::-1]


class CompactExceptionFormatter(logging.Formatter):
    """Human formatter that prints exception chains root cause first.

    Each link is one line; below it only the frames that live in spotlink itself.

        12:00:01 │ ERROR   │ spotlink.client:101 │ search failed
        ╰─► ConnectError: All connection attempts failed
        ╰─► TransportError: GET https://api.spotify.com/v1/search failed
            spotify_client.py:142 in _request
    """

    def formatException(self, ei: Any) -> str:
        exc = ei[1]
        if exc is None:
            return ""

        lines: list[str] = []
        for link in _exception_chain(exc):
            lines.append(f"╰─► {type(link).__name__}: {link}")
            for frame in traceback.extract_tb(link.__traceback__):
                if PACKAGE_NAME not in Path(frame.filename).parts:
                    continue
                lines.append(
                    f"    {Path(frame.filename).name}:{frame.lineno} in {frame.name}"
                )
        return "\n".join(lines)


class CustomJsonFormatter(jsonlogger.JsonFormatter):  # type: ignore[name-defined,misc]
    """One JSON object per record with stable top-level keys."""

    def __init__(self, *args: Any, app_name: str = PACKAGE_NAME, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.app_name = app_name

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            app=self.app_name,
            location=f"{record.module}.{record.funcName}:{record.lineno}",
        )

        correlation_id = getattr(record, "correlation_id", "")
        if correlation_id:
            log_record["correlation_id"] = correlation_id
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    app_name: str = PACKAGE_NAME,
) -> None:
    """Route all logging to stdout through a single handler.

    Replaces whatever handlers the root logger had, so calling it again (tests,
    a second create_client) doesn't duplicate output.

    Args:
        log_level: Level name (DEBUG, INFO, ...); unknown names fall back to INFO
        json_format: JSON lines instead of the compact human format
        app_name: Stamped into every JSON record as "app"
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    if json_format:
        handler.setFormatter(
            CustomJsonFormatter(
                "%(timestamp)s %(level)s %(name)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
                app_name=app_name,
            )
        )
    else:
        handler.setFormatter(
            CompactExceptionFormatter(
                fmt="%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    root_logger = logging.getLogger()
    for old_handler in list(root_logger.handlers):
        root_logger.removeHandler(old_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured (level={log_level}, json={json_format}, app={app_name})"
    )
