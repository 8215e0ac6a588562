"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` polled once per liveness tick by the
stream transport. A host that owns a lifecycle signal (for example "the
session is still loaded") adapts it with :meth:`CancellationToken.from_callable`.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from .state import State


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe for ``cancel`` + ``cancelled`` usage so a host thread can
    request cancellation of a call running on an event loop. Child tokens
    inherit cancellation when the parent is cancelled.
    """

    def __init__(
        self,
        *,
        parent: "CancellationToken | None" = None,
        predicate: Optional[Callable[[], bool]] = None,
        predicate_reason: str = "host shutdown",
    ) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._predicate = predicate
        self._predicate_reason = predicate_reason
        if parent is not None:
            parent.link_child(self)

    @classmethod
    def from_callable(cls, is_cancelled: Callable[[], bool], reason: str = "host shutdown") -> "CancellationToken":
        """Wrap a host predicate; the token reports cancelled once it returns True."""
        return cls(predicate=is_cancelled, predicate_reason=reason)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested (or the host predicate fired)."""
        if not self._state.cancelled and self._predicate is not None and self._predicate():
            self.cancel(self._predicate_reason)
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation and cascade to children."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            children = list(self._children)
        for child in children:
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
