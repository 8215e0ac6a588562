"""Finalize stream helper.

Located within the streaming package to localize terminal event logging of
metrics for every protocol client.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ErrorCode, ProviderError
from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    error: Optional[BaseException] = None,
) -> None:
    """Emit the consolidated terminal log line for one call.

    ``stream.end`` on success, ``stream.cancelled`` (DEBUG) on host
    cancellation, ``stream.error`` (WARNING) otherwise.
    """
    error_code: Optional[str] = None
    event = "stream.end"
    level = logging.INFO
    if error is not None:
        if isinstance(error, ProviderError):
            error_code = error.code.value
        else:
            error_code = error.__class__.__name__
        if error_code == ErrorCode.CANCELLED.value:
            event, level = "stream.cancelled", logging.DEBUG
        else:
            event, level = "stream.error", logging.WARNING

    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        error_code=error_code,
        emitted=metrics.emitted,
        tokens=metrics.total_tokens,
        level=level,
        error=str(error) if error is not None else None,
        **metrics.as_log_fields(),
    )


__all__ = ["finalize_stream"]
