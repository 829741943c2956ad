"""Hot-reload for mounted instances. Opt-in; import only if you need it."""

import logging

from hookline import _anchor
from hookline.errors import OrderViolationError
from hookline.instance import ComponentInstance, Definition

logger = logging.getLogger("hookline.hot_reload")


def reload(instance: ComponentInstance, definition: Definition):
    """Swap an instance's definition, keeping its state cells.

    - Renders the new definition against the existing cells
    - If the new definition requests cells in a different order, logs the
      failure and degrades to a fresh first render (state is reset)
    - Other exceptions from the definition propagate and the old definition
      is put back; if the reset render fails, the old definition comes back
      with no cells and its next render is a first render
    """
    name = instance.name
    old_definition = instance.definition
    old_count = len(instance.cells)
    _anchor.definitions[instance._id] = definition
    _anchor.dirty_flags[instance._id] = True

    try:
        output = instance.render()
    except OrderViolationError:
        logger.exception("Call order changed while reloading %s; resetting state", name)
        for cell_id in _anchor.cells[instance._id]:
            _anchor.drop_cell(cell_id)
        _anchor.cells[instance._id].clear()
        _anchor.rendered[instance._id] = False
        try:
            return instance.render()
        except Exception:
            # State is already gone; the next render mounts the old definition afresh.
            _anchor.definitions[instance._id] = old_definition
            raise
    except Exception:
        _anchor.definitions[instance._id] = old_definition
        raise

    logger.info(
        "Reloaded %s -> %s: kept %d cell(s)",
        name, instance.name, old_count,
    )
    return output
