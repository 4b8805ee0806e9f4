import sys
import weakref
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeRef:
    """Weak handle whose referent dies only when the test says so."""

    def __init__(self, value):
        self._value = value

    def __call__(self):
        return self._value

    def kill(self):
        self._value = None


class FakeHandle:
    def __init__(self, callback, payload):
        self.callback = callback
        self.payload = payload
        self.alive = True

    def fire(self):
        if self.alive:
            self.alive = False
            self.callback(*self.payload)


class FakeRuntime:
    """Deterministic stand-in for the garbage collector.

    ``kill`` clears weak handles without running finalizers (the window in
    which a lookup can observe a dead entry); ``collect`` clears them and
    then runs every pending finalizer for the value.
    """

    def __init__(self):
        self._refs = {}
        self._handles = {}
        self.unwatched = []

    def weak_ref(self, value):
        # Reject exactly what the real runtime rejects.
        weakref.ref(value)
        ref = FakeRef(value)
        self._refs.setdefault(id(value), []).append(ref)
        return ref

    def watch(self, value, callback, *payload):
        handle = FakeHandle(callback, payload)
        self._handles.setdefault(id(value), []).append(handle)
        return handle

    def unwatch(self, handle):
        if handle.alive:
            self.unwatched.append(handle)
        handle.alive = False

    def pending(self, value):
        return [h for h in self._handles.get(id(value), []) if h.alive]

    def kill(self, value):
        for ref in self._refs.pop(id(value), []):
            ref.kill()

    def finalize(self, value):
        for handle in self._handles.pop(id(value), []):
            handle.fire()

    def collect(self, value):
        self.kill(value)
        self.finalize(value)


class Payload:
    """Plain weak-referenceable value."""

    def __init__(self, name: str = "value"):
        self.name = name

    def __repr__(self):
        return f"Payload({self.name!r})"


@pytest.fixture
def runtime():
    return FakeRuntime()


@pytest.fixture
def payload_factory():
    return Payload
