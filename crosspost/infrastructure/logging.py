"""
Logging configuration for the publisher service.

Every log line is a JSON object carrying the service name and, inside an
HTTP request, the correlation id bound by the middleware. Platform tokens
travel in query strings, JSON bodies and error payloads, so a redaction
processor masks any secret-looking key before rendering.
"""

import logging
import sys
import time
from typing import Any

import structlog

SECRET_KEYS = frozenset(
    {
        "access_token",
        "authorization",
        "client_secret",
        "oauth_signature",
        "token_secret",
    }
)


def configure_logging(service_name: str, debug: bool = False) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        service_name: Value of the ``service`` key on every event
        debug: Emit DEBUG events (media fetch sizes, poll states)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            _redact_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _add_service_name(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def _redact_secrets(logger, method_name, event_dict):
    return redact(event_dict)


def redact(value: Any) -> Any:
    """Return a copy of value with secret keys masked, recursing into dicts and lists."""
    if isinstance(value, dict):
        return {
            key: "[REDACTED]" if str(key).lower() in SECRET_KEYS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item) for item in value)
    return value


class Timer:
    """
    Wall-clock timer for one target's publish.

        with Timer() as t:
            await adapter.publish(client, request, fetcher)
        logger.info("Target published", duration_ms=t.duration_ms)
    """

    def __init__(self) -> None:
        self._start = 0.0
        self._end: float | None = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; still running timers report time so far."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 2)


def sanitize_for_logging(value: str, visible_chars: int = 4) -> str:
    """Keep the first few characters of an identifier, mask the rest."""
    if not value:
        return ""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)
