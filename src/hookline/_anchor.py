"""Data anchor — plain Python structures that hold all runtime state.

Cells and instances are thin handles holding an _id; everything they know
lives here. A missing id means the owner was unmounted and the handle is stale.
"""

import itertools

# State Cell data
cell_values: dict[int, object] = {}
cell_versions: dict[int, int] = {}
cell_keys: dict[int, object] = {}  # cell_id -> optional call-order label
cell_owners: dict[int, int] = {}  # cell_id -> instance_id

# Component Instance data
definitions: dict[int, object] = {}  # instance_id -> callable
props: dict[int, dict] = {}
cells: dict[int, list] = {}  # instance_id -> ordered cell IDs
outputs: dict[int, object] = {}
dirty_flags: dict[int, bool] = {}
rendered: dict[int, bool] = {}  # has a first render completed
subscribers: dict[int, list] = {}

_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def drop_instance(instance_id: int) -> None:
    """Forget an instance and every cell it owns."""
    for cell_id in cells.pop(instance_id, []):
        drop_cell(cell_id)
    definitions.pop(instance_id, None)
    props.pop(instance_id, None)
    outputs.pop(instance_id, None)
    dirty_flags.pop(instance_id, None)
    rendered.pop(instance_id, None)
    subscribers.pop(instance_id, None)


def drop_cell(cell_id: int) -> None:
    cell_values.pop(cell_id, None)
    cell_versions.pop(cell_id, None)
    cell_keys.pop(cell_id, None)
    cell_owners.pop(cell_id, None)
