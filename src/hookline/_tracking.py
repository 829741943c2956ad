"""Render tracking and the host-driven pump.

A contextvar names the instance whose definition is currently executing, so
use_state() can find the cell at the current position.

Setters never render inline: they add the owning instance to _pending. The
host drains it with flush(), or opens a tick() scope that flushes when the
outermost scope exits.
"""

from __future__ import annotations

import contextvars
import logging
from typing import TYPE_CHECKING

from hookline import _anchor

if TYPE_CHECKING:
    from hookline.instance import ComponentInstance

logger = logging.getLogger("hookline.tracking")


class RenderFrame:
    """Position of the next use_state() call inside one render pass."""

    __slots__ = ("instance", "cursor", "first")

    def __init__(self, instance: ComponentInstance, first: bool) -> None:
        self.instance = instance
        self.cursor = 0
        self.first = first


current_frame: contextvars.ContextVar[RenderFrame | None] = contextvars.ContextVar(
    "current_frame", default=None
)

# Batch depth counter. When > 0, flushing is deferred to the outermost exit.
_batch_depth: int = 0

# Dirty instances awaiting a render pass. A dict keeps insertion order.
_pending: dict[ComponentInstance, None] = {}


def begin_batch() -> None:
    """Open a host turn. Setters inside only queue; turns may nest."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Close a host turn. Closing the outermost turn runs one render pass."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        flush()


def schedule(instance: ComponentInstance) -> None:
    """Queue a dirty instance for the next render pass."""
    _pending[instance] = None


def discard(instance: ComponentInstance) -> None:
    _pending.pop(instance, None)


def flush() -> int:
    """Render every pending instance once. Handles instances dirtied during flush.

    Returns the number of render passes performed.
    """
    count = 0
    while _pending:
        # Snapshot and clear: renders may dirty other instances.
        batch = list(_pending)
        _pending.clear()
        for i, instance in enumerate(batch):
            try:
                instance.render()
            except Exception:
                _requeue_front(batch[i:])
                raise
            count += 1
    if count:
        logger.debug("Flushed %d render(s)", count)
    return count


def _requeue_front(instances: list[ComponentInstance]) -> None:
    """Put unrendered instances back ahead of anything dirtied since the snapshot."""
    newer = list(_pending)
    _pending.clear()
    for instance in instances + newer:
        if instance._id in _anchor.definitions:
            _pending.setdefault(instance, None)


def get_pending_count() -> int:
    """Number of instances waiting to render. Useful for testing."""
    return len(_pending)


def reset() -> None:
    """Drop all pending work and batching state. Intended for test isolation."""
    global _batch_depth
    _batch_depth = 0
    _pending.clear()
