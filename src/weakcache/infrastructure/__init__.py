from .gc_runtime import FinalizationHandle, GcRuntime, ReferenceRuntime, WeakHandle

__all__ = [
    "FinalizationHandle",
    "GcRuntime",
    "ReferenceRuntime",
    "WeakHandle",
]
