"""Tests for state cells, use_state and use_reducer."""

import pytest

from hookline.cell import is_bailout_enabled
from hookline import (
    HooklineError,
    StaleReferenceError,
    flush,
    get_pending_count,
    mount,
    set_bailout,
    use_reducer,
    use_state,
)


def _holder(initial, setters):
    """Definition that renders its single cell and leaks the setter."""

    def holder(props):
        value, set_value = use_state(initial)
        setters.append(set_value)
        return value

    return holder


class TestUseState:
    def test_initial_value(self):
        inst, output = mount(_holder(7, []))
        assert output == 7
        assert inst.cells[0].value == 7
        assert inst.cells[0].version == 0

    def test_lazy_initial(self):
        calls = []

        def make():
            calls.append(1)
            return [1, 2]

        setters = []
        inst, output = mount(_holder(make, setters))
        assert output == [1, 2]
        setters[-1]([3])
        flush()
        assert inst.output == [3]
        assert calls == [1]  # only on first render

    def test_initial_ignored_after_first_render(self):
        def counter(props):
            count, set_count = use_state(props["start"])
            return count

        inst, _ = mount(counter, {"start": 1})
        assert inst.update_props({"start": 50}) == 1

    def test_outside_render_raises(self):
        with pytest.raises(HooklineError):
            use_state(0)

    def test_setter_is_bound_to_cell(self):
        setters = []
        inst, _ = mount(_holder(0, setters))
        assert setters[0].cell == inst.cells[0]
        assert setters[0].cell.owner == inst


class TestSetter:
    def test_literal_does_not_render_inline(self):
        setters = []
        inst, _ = mount(_holder(0, setters))
        setters[0](5)
        assert inst.output == 0
        assert inst.dirty
        assert inst.cells[0].value == 5
        assert get_pending_count() == 1

    def test_last_literal_wins(self):
        setters = []
        inst, _ = mount(_holder(0, setters))
        setters[0](1)
        setters[0](9)
        setters[0](4)
        flush()
        assert inst.output == 4

    def test_updaters_apply_in_call_order(self):
        setters = []
        inst, _ = mount(_holder(2, setters))
        setters[0](lambda v: v + 3)
        setters[0](lambda v: v * 10)
        flush()
        assert inst.output == 50

    def test_version_increments_per_accepted_update(self):
        setters = []
        inst, _ = mount(_holder(0, setters))
        cell = inst.cells[0]
        setters[0](1)
        setters[0](2)
        assert cell.version == 2
        flush()
        assert cell.version == 2

    def test_bailout_skips_equal_value(self):
        setters = []
        inst, _ = mount(_holder(500, setters))
        setters[0](500)
        assert not inst.dirty
        assert inst.cells[0].version == 0
        assert get_pending_count() == 0

    def test_without_bailout_output_unchanged(self):
        set_bailout(False)
        assert not is_bailout_enabled()
        setters = []
        inst, output = mount(_holder(500, setters))
        setters[0](500)
        assert inst.dirty
        assert inst.cells[0].version == 1
        flush()
        assert inst.output == output == 500

    def test_stale_after_unmount(self):
        setters = []
        inst, _ = mount(_holder(0, setters))
        cell = inst.cells[0]
        inst.unmount()
        assert cell.destroyed
        with pytest.raises(StaleReferenceError):
            setters[0](1)
        with pytest.raises(StaleReferenceError):
            cell.value

    def test_repr(self):
        inst, _ = mount(_holder(5, []))
        cell = inst.cells[0]
        assert "StateCell(5, version=0)" in repr(cell)
        inst.unmount()
        assert "destroyed" in repr(cell)


class TestUseReducer:
    def test_dispatch_composes(self):
        dispatches = []

        def reducer(state, action):
            if action == "inc":
                return state + 1
            if action == "reset":
                return 0
            return state

        def counter(props):
            count, dispatch = use_reducer(reducer, 10)
            dispatches.append(dispatch)
            return f"count={count}"

        inst, output = mount(counter)
        assert output == "count=10"
        dispatches[-1]("inc")
        dispatches[-1]("inc")
        flush()
        assert inst.output == "count=12"
        dispatches[-1]("reset")
        flush()
        assert inst.output == "count=0"

    def test_unknown_action_bails_out(self):
        dispatches = []

        def counter(props):
            count, dispatch = use_reducer(lambda s, a: s, 1)
            dispatches.append(dispatch)
            return count

        inst, _ = mount(counter)
        dispatches[-1]("noop")
        assert not inst.dirty
