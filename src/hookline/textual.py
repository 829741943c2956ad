"""Textual host bridge for hookline. Opt-in; requires textual.

Pushes an instance's output into a widget whenever it changes. Guard,
NoMatches handling and thread marshalling live here, not at callsites.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Apps currently inside pause(), keyed by id(app).
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Hold back bind() pushes while the app swaps out the bound widgets."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Can bind() query and update widgets on this app right now?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, instance, selector, *, to_renderable=str, push_current=True):
    """Mirror instance output into ``app.query_one(selector)`` via ``update()``.

    Updates are skipped while the app is not running or paused, NoMatches
    from the query is ignored, and calls from other threads are marshalled
    through call_from_thread. Returns a disposer that stops the binding.
    """
    _main = threading.get_ident()

    def _guarded(output):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, output)
        else:
            _safe(output)

    def _safe(output):
        try:
            app.query_one(selector).update(to_renderable(output))
        except NoMatches:
            pass

    dispose = instance.subscribe(_guarded)
    if push_current:
        _guarded(instance.output)
    return dispose
