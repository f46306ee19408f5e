# job_aggregator/observability.py
from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ErrorSink(Protocol):
    """Receives failures that were isolated instead of propagated."""

    def report(self, context: str, identifier: str, error: BaseException) -> None:
        ...


class LoggingErrorSink:
    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def report(self, context: str, identifier: str, error: BaseException) -> None:
        self.log.warning("[%s] %s: %s", context, identifier, error)


def report_safely(sink: ErrorSink, context: str, identifier: str, error: BaseException) -> None:
    # a broken sink must never change the caller's control flow
    try:
        sink.report(context, identifier, error)
    except Exception:
        logger.exception("Error sink failed while reporting %s %s", context, identifier)
