"""Component instances — a definition bound to props and its own state cells.

A definition is a plain function ``definition(props) -> output``. It reads
state through use_state(); the instance supplies the cells in the order
they were first requested.

State machine:
    MOUNTED_CLEAN --setter--> MOUNTED_DIRTY --render--> MOUNTED_CLEAN
    any --unmount--> UNMOUNTED (terminal)

All state lives in _anchor; instances are thin handles holding an _id.
"""

from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from hookline import _anchor
from hookline._tracking import RenderFrame, current_frame, discard
from hookline.cell import StateCell
from hookline.errors import OrderViolationError, StaleReferenceError

logger = logging.getLogger("hookline.instance")

Definition = Callable[[Mapping[str, Any]], Any]
Disposer = Callable[[], None]

_UNSET = object()


class Status(enum.Enum):
    MOUNTED_CLEAN = "mounted-clean"
    MOUNTED_DIRTY = "mounted-dirty"
    UNMOUNTED = "unmounted"


class ComponentInstance:
    """A live, stateful binding of a definition. Constructing one mounts it."""

    __slots__ = ("_id",)

    def __init__(self, definition: Definition, props: Mapping[str, Any] | None = None) -> None:
        self._id = _anchor.new_id()
        _anchor.definitions[self._id] = definition
        _anchor.props[self._id] = dict(props or {})
        _anchor.cells[self._id] = []
        _anchor.dirty_flags[self._id] = True
        _anchor.rendered[self._id] = False
        _anchor.subscribers[self._id] = []
        logger.debug("Mounting %s", self.name)
        try:
            self._render_pass()
        except Exception:
            discard(self)
            _anchor.drop_instance(self._id)
            raise

    @classmethod
    def _from_id(cls, instance_id: int) -> ComponentInstance:
        inst = object.__new__(cls)
        inst._id = instance_id
        return inst

    def _check(self) -> None:
        if self._id not in _anchor.definitions:
            raise StaleReferenceError(f"component instance {self._id} has been unmounted")

    # --- Read-only views ---

    @property
    def status(self) -> Status:
        if self._id not in _anchor.definitions:
            return Status.UNMOUNTED
        if _anchor.dirty_flags[self._id]:
            return Status.MOUNTED_DIRTY
        return Status.MOUNTED_CLEAN

    @property
    def name(self) -> str:
        self._check()
        definition = _anchor.definitions[self._id]
        return getattr(definition, "__name__", type(definition).__name__)

    @property
    def definition(self) -> Definition:
        self._check()
        return _anchor.definitions[self._id]

    @property
    def props(self) -> Mapping[str, Any]:
        self._check()
        return MappingProxyType(_anchor.props[self._id])

    @property
    def dirty(self) -> bool:
        self._check()
        return _anchor.dirty_flags[self._id]

    @property
    def output(self) -> Any:
        """The most recently rendered output."""
        self._check()
        return _anchor.outputs[self._id]

    @property
    def cells(self) -> tuple[StateCell, ...]:
        self._check()
        return tuple(StateCell(cell_id) for cell_id in _anchor.cells[self._id])

    # --- Operations ---

    def render(self) -> Any:
        """Recompute output if dirty; otherwise return the last output unchanged."""
        self._check()
        if not _anchor.dirty_flags[self._id]:
            return _anchor.outputs[self._id]
        return self._render_pass()

    def update_props(self, props: Mapping[str, Any]) -> Any:
        """Replace props and render. Always renders, even if props compare equal."""
        self._check()
        _anchor.props[self._id] = dict(props)
        _anchor.dirty_flags[self._id] = True
        return self._render_pass()

    def unmount(self) -> None:
        """Destroy all owned cells and drop any pending render."""
        self._check()
        logger.debug("Unmounting %s", self.name)
        discard(self)
        _anchor.drop_instance(self._id)

    def subscribe(self, callback: Callable[[Any], None]) -> Disposer:
        """Call callback(output) whenever a render produces different output.

        Returns a function that removes the subscription.
        """
        self._check()
        subs = _anchor.subscribers[self._id]
        subs.append(callback)

        def _unsubscribe() -> None:
            try:
                subs.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def _render_pass(self) -> Any:
        first = not _anchor.rendered[self._id]
        owned = _anchor.cells[self._id]
        frame = RenderFrame(self, first)

        # Cleared before running so a setter called during render re-dirties.
        _anchor.dirty_flags[self._id] = False
        token = current_frame.set(frame)
        try:
            output = _anchor.definitions[self._id](MappingProxyType(_anchor.props[self._id]))
            if not first and frame.cursor != len(owned):
                raise OrderViolationError(
                    f"{self.name} requested {frame.cursor} cell(s) "
                    f"but the first render allocated {len(owned)}"
                )
        except Exception:
            if self._id in _anchor.definitions:
                _anchor.dirty_flags[self._id] = True
                if first:
                    for cell_id in owned:
                        _anchor.drop_cell(cell_id)
                    owned.clear()
            raise
        finally:
            current_frame.reset(token)

        # The definition unmounted its own instance; its output is discarded.
        if self._id not in _anchor.definitions:
            raise StaleReferenceError(f"component instance {self._id} was unmounted while rendering")

        _anchor.rendered[self._id] = True
        previous = _anchor.outputs.get(self._id, _UNSET)
        _anchor.outputs[self._id] = output
        if not _anchor.dirty_flags[self._id]:
            discard(self)
        logger.debug("Rendered %s (%d cell(s))", self.name, len(owned))

        if previous is _UNSET or (previous is not output and previous != output):
            for callback in list(_anchor.subscribers[self._id]):
                callback(output)
        return output

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ComponentInstance) and other._id == self._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        status = self.status
        if status is Status.UNMOUNTED:
            return f"ComponentInstance(#{self._id}, unmounted)"
        return f"ComponentInstance({self.name}, {status.value})"
