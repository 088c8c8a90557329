"""Dependency tracking engine — the heart of depfx.

Uses a contextvar to record which effect is currently running, so that any
tracked read made while it runs subscribes that effect to the (target, key)
pair. A tracked write re-runs every subscriber of the pair.

Every run starts by unsubscribing the effect from everything it read last
time, so the dependency sets always reflect the most recent run's control
flow.
"""

from __future__ import annotations

import contextvars
import logging
import weakref
from collections.abc import Hashable
from enum import Enum

from depfx import _anchor

logger = logging.getLogger("depfx.tracking")

# The id of the currently-running effect.
# When set, any track() call subscribes that effect.
current_effect: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "current_effect", default=None
)


class TrackOp(str, Enum):
    """Kind of read reported by the interception layer. Informational."""

    GET = "get"
    HAS = "has"
    ITERATE = "iterate"


class TriggerOp(str, Enum):
    """Kind of write reported by the interception layer. Informational."""

    SET = "set"
    ADD = "add"
    DELETE = "delete"
    CLEAR = "clear"


def run_effect(effect_id: int):
    """Run an effect's computation, re-collecting its dependencies.

    Inactive effects call the computation directly without tracking.
    """
    fn = _anchor.computations[effect_id]
    if not _anchor.active[effect_id]:
        return fn()

    _anchor.parents[effect_id] = current_effect.get()
    token = current_effect.set(effect_id)
    try:
        cleanup(effect_id)
        return fn()
    finally:
        current_effect.reset(token)


def cleanup(effect_id: int) -> None:
    """Remove the effect from every dependency set it belongs to."""
    subs = _anchor.subscriptions[effect_id]
    for dep in subs:
        dep.pop(effect_id, None)
    subs.clear()


def _deps_for(target: object) -> dict[Hashable, _anchor.Dep]:
    target_id = id(target)
    deps_map = _anchor.targets.get(target_id)
    if deps_map is None:
        try:
            weakref.finalize(target, _anchor.forget_target, target_id)
        except TypeError:
            # dict, list and friends: the interception layer must call
            # release_target() when it drops the object.
            logger.debug(
                "tracking %s %#x without weak reference; release_target() required",
                type(target).__name__,
                target_id,
            )
        deps_map = _anchor.targets[target_id] = {}
    return deps_map


def release_target(target: object) -> None:
    """Drop every dependency recorded for target.

    Weak-referenceable targets are dropped automatically when collected.
    Others (plain dict, list, ...) stay keyed by id() until released, so
    call this before letting go of them.
    """
    _anchor.forget_target(id(target))


def track(target: object, key: Hashable, op: TrackOp = TrackOp.GET) -> None:
    """Subscribe the running effect, if any, to target[key]."""
    effect_id = current_effect.get()
    if effect_id is None:
        return
    # Stopped from inside its own run.
    if not _anchor.active.get(effect_id, False):
        return

    deps_map = _deps_for(target)
    dep = deps_map.get(key)
    if dep is None:
        dep = deps_map[key] = {}

    if effect_id not in dep:
        dep[effect_id] = None
        _anchor.subscriptions[effect_id].append(dep)


def trigger(
    target: object,
    key: Hashable,
    new_value: object = None,
    old_value: object = None,
    op: TriggerOp = TriggerOp.SET,
) -> None:
    """Re-run every effect subscribed to target[key].

    The running effect is skipped, so an effect that writes what it reads
    does not recurse into itself.
    """
    deps_map = _anchor.targets.get(id(target))
    if deps_map is None:
        return
    dep = deps_map.get(key)
    if not dep:
        return

    running = current_effect.get()
    # Iterate a snapshot: each rerun removes and re-adds itself to the live set.
    for effect_id in list(dep):
        if effect_id == running:
            logger.debug("effect %d skipped its own write to %r", effect_id, key)
            continue
        # Stopped (or released) since the snapshot was taken.
        if not _anchor.active.get(effect_id, False):
            continue
        run_effect(effect_id)


def get_subscriber_count(target: object, key: Hashable) -> int:
    """Number of effects subscribed to target[key]. Useful for testing."""
    deps_map = _anchor.targets.get(id(target))
    if deps_map is None:
        return 0
    return len(deps_map.get(key, ()))
