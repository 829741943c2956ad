"""State cells — one unit of persisted state owned by a component instance.

use_state() is called by a component definition while it renders. On the
first render of an instance it allocates a cell at the current position;
on later renders it returns the cell already at that position.

A setter never renders. It stores the new value, bumps the cell's version,
marks the owner dirty and queues it for the next render pass.

All state lives in _anchor; instances are thin handles holding an _id.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from hookline import _anchor
from hookline._tracking import current_frame, schedule
from hookline.errors import HooklineError, OrderViolationError, StaleReferenceError

T = TypeVar("T")
A = TypeVar("A")

_bailout: bool = True


def set_bailout(enabled: bool) -> None:
    """Toggle the equal-value bail-out.

    When enabled (the default), a setter whose new value equals the current
    one is dropped: no version bump, owner not dirtied. Rendered output is
    the same either way; only the number of render passes changes.
    """
    global _bailout
    _bailout = enabled


def is_bailout_enabled() -> bool:
    return _bailout


class StateCell(Generic[T]):
    """Handle to a single state cell."""

    __slots__ = ("_id",)

    def __init__(self, cell_id: int) -> None:
        self._id = cell_id

    def _check(self) -> None:
        if self._id not in _anchor.cell_values:
            raise StaleReferenceError(f"state cell {self._id} belongs to an unmounted instance")

    @property
    def destroyed(self) -> bool:
        return self._id not in _anchor.cell_values

    @property
    def value(self) -> T:
        self._check()
        return _anchor.cell_values[self._id]

    @property
    def version(self) -> int:
        self._check()
        return _anchor.cell_versions[self._id]

    @property
    def key(self) -> object:
        self._check()
        return _anchor.cell_keys[self._id]

    @property
    def owner(self):
        """The owning ComponentInstance."""
        from hookline.instance import ComponentInstance

        self._check()
        return ComponentInstance._from_id(_anchor.cell_owners[self._id])

    def set(self, value: T | Callable[[T], T]) -> bool:
        """Apply a literal value or an updater. Returns True if the update was accepted."""
        self._check()
        old = _anchor.cell_values[self._id]
        new = value(old) if callable(value) else value
        if _bailout and (old is new or old == new):
            return False
        _anchor.cell_values[self._id] = new
        _anchor.cell_versions[self._id] += 1
        owner = self.owner
        _anchor.dirty_flags[owner._id] = True
        schedule(owner)
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StateCell) and other._id == self._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        if self.destroyed:
            return f"StateCell(#{self._id}, destroyed)"
        return f"StateCell({self.value!r}, version={self.version})"


class Setter(Generic[T]):
    """Callable bound to one cell, returned by use_state()."""

    __slots__ = ("cell",)

    def __init__(self, cell: StateCell[T]) -> None:
        self.cell = cell

    def __call__(self, value: T | Callable[[T], T]) -> None:
        self.cell.set(value)

    def __repr__(self) -> str:
        return f"Setter({self.cell!r})"


def _claim_cell(initial: Any, key: object) -> StateCell:
    """Return the cell at the current render position, allocating it on first render."""
    frame = current_frame.get()
    if frame is None:
        raise HooklineError("use_state() can only be called while a component is rendering")

    instance_id = frame.instance._id
    owned = _anchor.cells[instance_id]
    position = frame.cursor
    frame.cursor += 1

    if frame.first:
        cell_id = _anchor.new_id()
        _anchor.cell_values[cell_id] = initial() if callable(initial) else initial
        _anchor.cell_versions[cell_id] = 0
        _anchor.cell_keys[cell_id] = key
        _anchor.cell_owners[cell_id] = instance_id
        owned.append(cell_id)
        return StateCell(cell_id)

    if position >= len(owned):
        raise OrderViolationError(
            f"render requested cell #{position + 1} but the first render allocated {len(owned)}"
        )
    cell_id = owned[position]
    if _anchor.cell_keys[cell_id] != key:
        raise OrderViolationError(
            f"cell #{position + 1} requested as {key!r}, "
            f"first render allocated {_anchor.cell_keys[cell_id]!r}"
        )
    return StateCell(cell_id)


def use_state(initial: T | Callable[[], T], *, key: object = None) -> tuple[T, Setter[T]]:
    """Return the current value of the next state cell and its setter.

    A callable ``initial`` is invoked once, on the first render, to produce the
    starting value. ``key`` optionally labels the cell so reordered calls are
    caught as OrderViolationError.

    Usage:
        def counter(props):
            count, set_count = use_state(props["initial_value"])
            return f"<button>{count}</button>"

        set_count(lambda c: c + props["increment"])
    """
    cell = _claim_cell(initial, key)
    return cell.value, Setter(cell)


def use_reducer(
    reducer: Callable[[T, A], T],
    initial: T | Callable[[], T],
    *,
    key: object = None,
) -> tuple[T, Callable[[A], None]]:
    """A state cell updated through reducer(state, action).

    dispatch() applies the reducer to the cell's latest value, so several
    dispatches before a render compose in call order.
    """
    cell = _claim_cell(initial, key)

    def dispatch(action: A) -> None:
        cell.set(lambda state: reducer(state, action))

    return cell.value, dispatch
