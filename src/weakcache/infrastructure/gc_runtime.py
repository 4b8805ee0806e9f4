"""Weak-reference and finalization primitives used by :class:`WeakCache`.

The cache never talks to :mod:`weakref` directly.  It goes through a
:class:`ReferenceRuntime` so tests can swap in a runtime that collects
values on demand instead of waiting for the interpreter to do it.

Under CPython, :class:`GcRuntime` finalizes acyclic values as soon as
their last strong reference drops; values caught in reference cycles are
finalized on the next cyclic collection.  Callers should only rely on
*eventual* eviction.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Protocol

from ..config import FINALIZE_AT_EXIT

LOGGER = logging.getLogger(__name__)

# Zero-argument callable returning the referent, or ``None`` once collected.
WeakHandle = Callable[[], Any]


class FinalizationHandle(Protocol):
    """Cancellable subscription returned by :meth:`ReferenceRuntime.watch`."""

    @property
    def alive(self) -> bool: ...


class ReferenceRuntime(Protocol):
    """Capability interface over the host garbage collector."""

    def weak_ref(self, value: Any) -> WeakHandle:
        """Return a weak handle to *value*.

        Raises :class:`TypeError` if *value* cannot be weakly referenced.
        """
        ...

    def watch(self, value: Any, callback: Callable[..., None], *payload: Any) -> FinalizationHandle:
        """Call ``callback(*payload)`` once, after *value* is collected."""
        ...

    def unwatch(self, handle: FinalizationHandle) -> None:
        """Cancel *handle* so its callback never runs.  Idempotent."""
        ...


class GcRuntime:
    """:class:`ReferenceRuntime` backed by :mod:`weakref`."""

    def __init__(self, finalize_at_exit: bool = FINALIZE_AT_EXIT) -> None:
        self._finalize_at_exit = finalize_at_exit

    def weak_ref(self, value: Any) -> WeakHandle:
        return weakref.ref(value)

    def watch(self, value: Any, callback: Callable[..., None], *payload: Any) -> weakref.finalize:
        # The payload must not reference *value*, or it would never die.
        finalizer = weakref.finalize(value, callback, *payload)
        finalizer.atexit = self._finalize_at_exit
        return finalizer

    def unwatch(self, handle: weakref.finalize) -> None:
        # ``detach`` returns None when the finalizer already ran or was
        # detached, which is exactly the no-op we want.
        handle.detach()
