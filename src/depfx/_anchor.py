"""Data anchor — plain Python structures that hold all reactive state.

Effects and the dependency store are plain dicts keyed by integer ids.
Effect instances are thin handles over these, and the store refers to
effects only by id, so neither side owns the other's lifetime.
"""

import itertools

# Dependency set: effect ids in subscription order (a dict used as an ordered set).
Dep = dict[int, None]

# Dependency store: id(target) -> property key -> Dep
targets: dict[int, dict[object, Dep]] = {}

# Effect state
computations: dict[int, object] = {}  # effect_id -> callable
active: dict[int, bool] = {}
parents: dict[int, int | None] = {}
subscriptions: dict[int, list[Dep]] = {}  # effect_id -> deps it is a member of

# ID generation — itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def forget_target(target_id: int) -> None:
    targets.pop(target_id, None)


def release_effect(effect_id: int) -> None:
    computations.pop(effect_id, None)
    active.pop(effect_id, None)
    parents.pop(effect_id, None)
    subscriptions.pop(effect_id, None)
