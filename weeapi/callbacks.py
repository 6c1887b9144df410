"""Callback plumbing between the host and Python objects.

The host only calls back into a script by function *name*, looked up in the
script's ``__main__`` module. Rather than requiring every callback to live in
the script's global scope, a handful of trampolines are exported there once
and every registration passes a synthetic integer id as callback data. The
trampoline resolves the id back to the object that owns the callback.
"""
import itertools
import logging
import sys
from typing import Any, Callable, Dict

from .utilities import evaluate_call

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


def compute_free_id() -> int:
    """Return a new id, unique for the lifetime of the script."""
    return next(_ids)


def export(name: str, function: Callable) -> str:
    """Make `function` callable by the host under `name`."""
    main = sys.modules["__main__"]
    if getattr(main, name, None) is not function:
        setattr(main, name, function)
    return name


class Callback:
    """Wraps a callable; the result is passed back unchanged."""

    def __init__(self, callback: Callable):
        if not callable(callback):
            raise TypeError("callback must be callable, got {!r}".format(callback))
        self.callback = callback

    def __call__(self, *args) -> Any:
        return self.callback(*args)

    def __repr__(self):
        return "<{} {!r}>".format(self.__class__.__name__, self.callback)


class EvaluatedCallback(Callback):
    """Wraps a callable whose outcome is turned into a host return code."""

    def __call__(self, *args) -> int:
        return evaluate_call(lambda: self.callback(*args))


class CallbackRegistry:
    """Id-keyed callback sets for objects that aren't hooks (buffers, bar items)."""

    _callbacks: Dict[int, Dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # subclasses of a registry class share its callbacks
        if CallbackRegistry in cls.__bases__:
            cls._callbacks = {}

    @classmethod
    def register_callback(cls, id: int, **callbacks: Any) -> None:
        cls._callbacks[id] = callbacks

    @classmethod
    def unregister_callback(cls, id: int) -> None:
        cls._callbacks.pop(id, None)

    @classmethod
    def call_callback(cls, id, kind: str, *args) -> Any:
        entry = cls._callbacks.get(int(id))
        if entry is None or entry.get(kind) is None:
            logger.warning("no %s registered for id %s", kind, id)
            return None
        return entry[kind](*args)

    @classmethod
    def find_callbacks(cls, **match: Any) -> Dict[str, Any]:
        for entry in cls._callbacks.values():
            if all(entry.get(k) == v for k, v in match.items()):
                return entry
        return {}
