"""Exceptions raised by the runtime."""


class HooklineError(RuntimeError):
    """Base class for runtime contract violations."""


class StaleReferenceError(HooklineError):
    """An instance or cell was addressed after it was unmounted."""


class OrderViolationError(HooklineError):
    """A render requested a different number or order of cells than the first render."""
