"""hookline: a minimal reactive component runtime for Python."""

from importlib.metadata import version as _version

__version__ = _version("hookline")

from hookline._tracking import flush, get_pending_count
from hookline.errors import HooklineError, StaleReferenceError, OrderViolationError
from hookline.cell import StateCell, Setter, use_state, use_reducer, set_bailout
from hookline.instance import ComponentInstance, Status
from hookline.root import mount, render, update_props, unmount, tick, event
# hot_reload and textual NOT auto-imported: opt-in only

__all__ = [
    "StateCell",
    "Setter",
    "use_state",
    "use_reducer",
    "set_bailout",
    "ComponentInstance",
    "Status",
    "mount",
    "render",
    "update_props",
    "unmount",
    "flush",
    "tick",
    "event",
    "get_pending_count",
    "HooklineError",
    "StaleReferenceError",
    "OrderViolationError",
]
