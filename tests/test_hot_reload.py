"""Tests for hot_reload — swapping definitions on live instances."""

import logging

import pytest

from hookline import StaleReferenceError, flush, mount, use_state
from hookline.hot_reload import reload


def counter_v1(props):
    count, set_count = use_state(0)
    counter_v1.setter = set_count
    return f"count={count}"


def counter_v2(props):
    count, set_count = use_state(0)
    return f"<b>{count}</b>"


def counter_two_cells(props):
    count, _ = use_state(0)
    step, _ = use_state(1)
    return f"count={count} step={step}"


class TestReload:
    def test_keeps_state(self):
        inst, _ = mount(counter_v1)
        counter_v1.setter(7)
        flush()
        assert reload(inst, counter_v2) == "<b>7</b>"
        assert inst.definition is counter_v2

    def test_logs_info(self, caplog):
        inst, _ = mount(counter_v1)
        with caplog.at_level(logging.INFO, logger="hookline.hot_reload"):
            reload(inst, counter_v2)
        assert "Reloaded counter_v1 -> counter_v2" in caplog.text
        assert "kept 1 cell(s)" in caplog.text

    def test_order_change_resets_state(self, caplog):
        """When the new definition changes call order, state starts fresh."""
        inst, _ = mount(counter_v1)
        old_setter = counter_v1.setter
        old_setter(7)
        flush()

        with caplog.at_level(logging.ERROR, logger="hookline.hot_reload"):
            output = reload(inst, counter_two_cells)

        assert output == "count=0 step=1"
        assert len(inst.cells) == 2
        assert "Call order changed" in caplog.text
        with pytest.raises(StaleReferenceError):
            old_setter(8)

    def test_failed_reset_render_restores_definition(self):
        def two_cells_broken(props):
            use_state(0)
            use_state(1)
            raise ValueError("boom")

        inst, _ = mount(counter_v1)
        counter_v1.setter(7)
        flush()

        with pytest.raises(ValueError, match="boom"):
            reload(inst, two_cells_broken)
        assert inst.definition is counter_v1
        assert inst.cells == ()
        assert inst.dirty
        assert inst.render() == "count=0"
        assert len(inst.cells) == 1

    def test_other_errors_restore_definition(self):
        def broken(props):
            raise ValueError("boom")

        inst, _ = mount(counter_v1)
        with pytest.raises(ValueError, match="boom"):
            reload(inst, broken)
        assert inst.definition is counter_v1
        assert inst.output == "count=0"
