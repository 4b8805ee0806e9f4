"""Custom exception hierarchy for weakcache."""

from __future__ import annotations


class WeakCacheError(Exception):
    """Base class for all custom errors raised by weakcache."""


class InvalidValueType(WeakCacheError, TypeError):
    """Raised when a value cannot be the target of a weak reference.

    Primitives (``int``, ``str``, ``bool``, ``float``, ``bytes``), ``None``,
    tuples and plain ``list`` / ``dict`` instances have no weak-reference
    slot in CPython.  Wrap them in an object (or a ``list``/``dict``
    subclass) before caching.
    """


class EvictionCallbackError(WeakCacheError):
    """Wraps an exception raised by a user ``on_evict`` hook.

    Never raised to callers; handed to :class:`ErrorHandler` instead so the
    failure cannot escape into the garbage collector.
    """

    def __init__(self, key: object, cause: BaseException) -> None:
        super().__init__(f"on_evict hook failed for key {key!r}: {cause}")
        self.key = key
        self.cause = cause


class OptionsValidationError(WeakCacheError, ValueError):
    """Raised when a ``WeakCache.from_options`` mapping fails validation."""
