"""Render-root entry points — the operations a host calls.

The host mounts a definition, drives render passes, feeds new props and
unmounts. Setter calls never render on their own: either call flush() once
per turn, or wrap the turn in tick() / @event so the pass runs when the
outermost scope exits.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Callable, Mapping, ParamSpec, TypeVar

from hookline._tracking import begin_batch, end_batch
from hookline.instance import ComponentInstance, Definition

P = ParamSpec("P")
R = TypeVar("R")


def mount(
    definition: Definition, props: Mapping[str, Any] | None = None
) -> tuple[ComponentInstance, Any]:
    """Create an instance, run its first render, return (instance, output)."""
    instance = ComponentInstance(definition, props)
    return instance, instance.output


def render(instance: ComponentInstance) -> Any:
    return instance.render()


def update_props(instance: ComponentInstance, props: Mapping[str, Any]) -> Any:
    return instance.update_props(props)


def unmount(instance: ComponentInstance) -> None:
    instance.unmount()


@contextmanager
def tick():
    """Treat the block as one host turn, such as one event-loop iteration.

    Setters inside only queue work; the turn ends with a single flush().

    Usage:
        with tick():
            set_count(lambda c: c + 1)
            set_count(lambda c: c + 1)
            # one render pass here, seeing count + 2
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()


def event(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run fn as one host turn.

    Setter calls inside fn coalesce into a single render pass after it returns.

    Usage:
        @event
        def on_click():
            set_count(lambda c: c + 1)
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with tick():
            return fn(*args, **kwargs)

    return wrapper
