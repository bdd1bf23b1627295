"""
Logger Implementation
=====================

structlog configuration for govproof.

Production (``json_logs``) renders one JSON object per line. Development
renders colored console lines, with long field elements shortened so a
public-signal list stays readable.

Private circuit inputs must never reach a log sink. Call sites log
circuit names, claim ids and public signals only; ``censor_sensitive``
is the backstop that redacts anything keyed like a private value.

Version: 0.1.0
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


SERVICE_NAME = "govproof"
SERVICE_VERSION = "0.1.0"

# Substrings of event keys whose values are never logged
SENSITIVE_KEYS = (
    "password",
    "secret",
    "token",
    "private",
    "witness",
    "inputs",
    "flags",
    "items",
)

REDACTED = "***REDACTED***"

# Decimal strings longer than this are shortened in console output
FIELD_ELEMENT_DISPLAY_DIGITS = 20


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return any(s in key_lower for s in SENSITIVE_KEYS)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if isinstance(k, str) and _is_sensitive(k) else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact(v) for v in value]
    if type(value) is tuple:
        return tuple(_redact(v) for v in value)
    return value


def censor_sensitive(
    logger: WrappedLogger | None,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact secrets and private circuit inputs, including inside nested dicts and lists."""
    return _redact(event_dict)


def _shorten(value: Any) -> Any:
    if isinstance(value, str) and value.isdigit() and len(value) > FIELD_ELEMENT_DISPLAY_DIGITS:
        return f"{value[:8]}...{value[-4:]} ({len(value)} digits)"
    if isinstance(value, list):
        return [_shorten(v) for v in value]
    return value


def shorten_field_elements(
    logger: WrappedLogger | None,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Abbreviate long decimal field elements for console output."""
    return {key: _shorten(value) for key, value in event_dict.items()}


def _service_context(service_name: str) -> Processor:
    def add_service_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("version", SERVICE_VERSION)
        return event_dict

    return add_service_context


def setup_logging(
    log_level: str | None = None,
    json_logs: bool | None = None,
    service_name: str = SERVICE_NAME,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name. Defaults to ``settings.log_level``
        json_logs: JSON output. Defaults to ``settings.json_logs``, always on in production
        service_name: Value of the ``service`` key on every entry
    """
    if log_level is None or json_logs is None:
        from govproof.config import settings

        log_level = log_level or settings.log_level.value
        if json_logs is None:
            json_logs = settings.json_logs or settings.is_production

    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context(service_name),
        censor_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        shared_processors += [structlog.dev.set_exc_info, shorten_field_elements]
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            # Locals would include witness values
            exception_formatter=structlog.dev.RichTracebackFormatter(
                show_locals=False,
                max_frames=10,
            ),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> "BoundLogger":
    """
    Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.info("zk_proof_generated", circuit="compute_threshold")
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values to every later log entry in this async context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """
    Bind values for the duration of a block.

    Example:
        with log_context(pack_id="eu_ai_act_rsp_demo"):
            await run_policy_pack(pack, prover)
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
