"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the host-supplied liveness signal checked once per
poll tick by the stream transport. Observing it aborts the in-flight request
and surfaces :class:`~chatstream_providers.base.errors.StreamCancelledError`.
"""

from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken"]
