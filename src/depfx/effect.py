"""Effects — computations that re-run when the state they read changes.

effect(fn) runs fn immediately, recording every tracked read it makes.
When any of those (target, key) pairs is written, fn runs again and its
dependencies are collected afresh.

All state lives in _anchor — instances are thin handles holding an _id.
"""

from __future__ import annotations

import logging
import weakref
from typing import Callable, Generic, TypeVar

from depfx import _anchor
from depfx._tracking import cleanup, run_effect

logger = logging.getLogger("depfx.effect")

T = TypeVar("T")


def _release_if_stopped(effect_id: int) -> None:
    # Active effects outlive their handle: the store still re-runs them.
    if _anchor.active.get(effect_id) is False:
        _anchor.release_effect(effect_id)
        logger.debug("released stopped effect %d", effect_id)


class Effect(Generic[T]):
    """A reactive computation with automatic dependency tracking."""

    __slots__ = ("_id", "__weakref__")

    def __init__(self, fn: Callable[[], T]) -> None:
        self._id = _anchor.new_id()
        _anchor.computations[self._id] = fn
        _anchor.active[self._id] = True
        _anchor.parents[self._id] = None
        _anchor.subscriptions[self._id] = []
        weakref.finalize(self, _release_if_stopped, self._id)

    @property
    def id(self) -> int:
        return self._id

    @property
    def active(self) -> bool:
        return _anchor.active[self._id]

    @property
    def parent_id(self) -> int | None:
        """Id of the effect that was running when this one last started."""
        return _anchor.parents[self._id]

    @property
    def _fn(self) -> Callable[[], T]:
        return _anchor.computations[self._id]

    def run(self) -> T:
        """Run the computation and return its result.

        An active effect drops its previous dependencies and collects new
        ones while the computation runs. A stopped effect just calls it.
        """
        return run_effect(self._id)

    def rerun(self) -> T:
        """Run again on demand, outside of any write notification."""
        return run_effect(self._id)

    def stop(self) -> None:
        """Deactivate. Disconnects from all dependencies."""
        if not _anchor.active[self._id]:
            return
        _anchor.active[self._id] = False
        cleanup(self._id)
        logger.debug("stopped effect %d (%s)", self._id, _name(self._fn))

    def __repr__(self) -> str:
        state = "active" if _anchor.active[self._id] else "stopped"
        return f"Effect({_name(self._fn)}, {state})"


def _name(fn) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


def effect(fn: Callable[[], T]) -> Effect[T]:
    """Run fn immediately, then re-run whenever any tracked state it read changes.

    Returns the Effect (call .stop() to detach it). Also usable as a decorator.

    Usage:
        state = State(count=0)
        log = []

        e = effect(lambda: log.append(state.count))
        # log == [0] — ran immediately

        state.count = 1
        # log == [0, 1] — re-ran because count changed

        e.stop()
        state.count = 2
        # log == [0, 1] — stopped
    """
    e = Effect(fn)
    e.run()  # Initial run to establish dependencies
    return e
