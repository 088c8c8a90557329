"""depfx: dependency-tracking effects for Python."""

from importlib.metadata import version as _version

__version__ = _version("depfx")

from depfx._tracking import TrackOp, TriggerOp, get_subscriber_count, release_target
from depfx.effect import Effect, effect
from depfx.hooks import notify_read, notify_write, set_dispatcher

create_effect = effect

__all__ = [
    "Effect",
    "effect",
    "create_effect",
    "notify_read",
    "notify_write",
    "set_dispatcher",
    "release_target",
    "TrackOp",
    "TriggerOp",
    "get_subscriber_count",
]
