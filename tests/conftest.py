import pytest

from hookline import _tracking, set_bailout


@pytest.fixture(autouse=True)
def _isolate_runtime():
    """Each test starts with no pending renders and the default bail-out."""
    _tracking.reset()
    set_bailout(True)
    yield
    _tracking.reset()
    set_bailout(True)
