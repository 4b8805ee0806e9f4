"""Default configuration values for weakcache."""

from __future__ import annotations

from typing import Final

from .errors.handler import ErrorSeverity

# Name used for stats counters, events and log messages when the caller does
# not supply one.
DEFAULT_CACHE_NAME: Final[str] = "weakcache"

# ``weakref.finalize`` runs pending finalizers at interpreter exit by default.
# Values alive at shutdown were never evicted, so their hooks stay silent.
FINALIZE_AT_EXIT: Final[bool] = False

EVICTION_ERROR_SEVERITY: Final[ErrorSeverity] = ErrorSeverity.ERROR
