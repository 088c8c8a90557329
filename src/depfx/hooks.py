"""Read/write hooks — the entry points for the interception layer.

Whatever makes state observable (a proxy, descriptors, __setattr__) calls
notify_read() on every property read and notify_write() after every
property write or delete, passing the target object and property key.

Thread safety: the running-effect pointer is context-local, but the
dependency store is shared. Call set_dispatcher() once from the owning
thread. After that, any notify_write() from another thread is marshaled
through the dispatcher. Owning-thread writes remain synchronous.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Callable

from depfx._tracking import TrackOp, TriggerOp, track, trigger

logger = logging.getLogger("depfx.hooks")

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_dispatcher = None
_dispatcher_thread = None


def set_dispatcher(dispatcher: Callable[[Callable[[], None]], object] | None) -> None:
    """Confine write notifications to the calling thread.

    Call once from the owning thread:
        depfx.set_dispatcher(loop.call_soon_threadsafe)

    After this, notify_write() from any other thread hands the notification
    to dispatcher instead of running effects in place. Pass None to undo.
    """
    global _dispatcher, _dispatcher_thread
    _dispatcher = dispatcher
    _dispatcher_thread = threading.current_thread() if dispatcher is not None else None


def notify_read(target: object, key: Hashable, op: TrackOp = TrackOp.GET) -> None:
    """Record that the running effect, if any, read target[key].

    Call before the read returns its value.
    """
    track(target, key, op)


def notify_write(
    target: object,
    key: Hashable,
    new_value: object = None,
    old_value: object = None,
    op: TriggerOp = TriggerOp.SET,
) -> None:
    """Re-run the effects that read target[key].

    Call after the underlying value has been updated, so reruns see it.
    Auto-marshals from foreign threads once a dispatcher is set.
    """
    if _dispatcher is not None and threading.current_thread() != _dispatcher_thread:
        logger.debug("dispatching write to %r from %s", key, threading.current_thread().name)
        _dispatcher(lambda: trigger(target, key, new_value, old_value, op))
    else:
        trigger(target, key, new_value, old_value, op)
