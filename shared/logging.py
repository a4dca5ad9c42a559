"""
Structured logging for the REST dispatcher.

Every dispatch runs inside ``dispatch_context``, so log lines emitted while a
request is in flight (waits, retries, transport errors, bucket eviction)
carry the request id, method and bucket key without each call site passing
them along.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

import structlog

from shared.config import get_config

# Correlates every log line of one logical caller, across retries
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def configure_logging(service_name: str = "rest_client", log_level: Optional[str] = None) -> None:
    """Configure JSON logging for the client and its ``service_name`` logger tree.

    The level defaults to ``REST_LOG_LEVEL`` from the client configuration.
    """
    level = getattr(logging, (log_level or get_config().log_level).upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_service_context,
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger(service_name).setLevel(level)


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Split ``rest_client.dispatcher`` into service and component fields."""
    service, _, component = event_dict.get("logger", "").partition(".")
    if component:
        event_dict["service"] = service
        event_dict["component"] = component
    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request id for the current task; a fresh one when omitted."""
    if request_id is None:
        request_id = uuid.uuid4().hex[:12]
    request_id_var.set(request_id)
    return request_id


def clear_context() -> None:
    request_id_var.set(None)
    structlog.contextvars.clear_contextvars()


@contextmanager
def dispatch_context(method: str, bucket: str) -> Iterator[str]:
    """Bind method, bucket and a request id to every log line of one dispatch.

    An id already set by the caller is reused so an application can tie
    several dispatches to one of its own operations.
    """
    request_id = request_id_var.get() or uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(request_id=request_id, method=method, bucket=bucket):
        yield request_id


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
