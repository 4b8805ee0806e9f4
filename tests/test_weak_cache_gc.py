"""WeakCache against the interpreter's collector.

CPython finalizes acyclic objects as soon as their last reference drops;
``gc.collect()`` covers objects caught in cycles.  These tests only assert
the state after an explicit collection.
"""

from __future__ import annotations

import gc
import weakref

import pytest

from weakcache import GcRuntime, WeakCache


class _Node:
    def __init__(self, name: str = "node"):
        self.name = name
        self.peer = None


def test_cache_does_not_keep_value_alive():
    cache = WeakCache()
    obj = _Node()
    probe = weakref.ref(obj)
    cache.set("a", obj)
    del obj
    gc.collect()
    assert probe() is None
    assert cache.get("a") is None


def test_collected_value_evicted_with_callback():
    evicted = []
    cache = WeakCache(evicted.append)
    obj = _Node()
    cache.set("a", obj)
    del obj
    gc.collect()
    assert evicted == ["a"]
    assert cache.size == 0


def test_cyclic_value_evicted_after_collection():
    evicted = []
    cache = WeakCache(evicted.append)
    first = _Node("first")
    second = _Node("second")
    first.peer, second.peer = second, first
    cache.set("cycle", first)
    del first, second
    gc.collect()
    assert evicted == ["cycle"]
    assert not cache.has("cycle")


def test_overwritten_value_collection_does_not_evict():
    evicted = []
    cache = WeakCache(evicted.append)
    old = _Node("old")
    new = _Node("new")
    cache.set("k", old)
    cache.set("k", new)
    del old
    gc.collect()
    assert evicted == []
    assert cache.get("k") is new


def test_deleted_value_collection_does_not_evict():
    evicted = []
    cache = WeakCache(evicted.append)
    obj = _Node()
    cache.set("k", obj)
    cache.delete("k")
    del obj
    gc.collect()
    assert evicted == []


def test_callback_does_not_keep_cache_alive():
    obj = _Node()
    cache = WeakCache()
    cache.set("a", obj)
    probe = weakref.ref(cache)
    del cache
    gc.collect()
    assert probe() is None
    # Finalizer still registered on obj; it must tolerate the dead cache.
    del obj
    gc.collect()


def test_hook_error_does_not_escape(caplog):
    def hook(key):
        raise RuntimeError("hook failed")

    cache = WeakCache(hook)
    obj = _Node()
    cache.set("a", obj)
    del obj
    gc.collect()
    assert cache.size == 0
    assert any("hook failed" in record.getMessage() for record in caplog.records)


def test_gc_runtime_finalizers_skip_interpreter_exit():
    runtime = GcRuntime()
    obj = _Node()
    handle = runtime.watch(obj, lambda: None)
    assert handle.alive
    assert handle.atexit is False
    runtime.unwatch(handle)
    assert not handle.alive
    # Second unwatch is a no-op.
    runtime.unwatch(handle)


def test_gc_runtime_weak_ref_rejects_primitives():
    runtime = GcRuntime()
    with pytest.raises(TypeError):
        runtime.weak_ref(42)
