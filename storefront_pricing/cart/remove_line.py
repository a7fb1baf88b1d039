"""RemoveLine cart operation."""

from typing import Optional

import structlog

from .state import CartState

logger = structlog.get_logger()


def remove_line(
    state: CartState, line_id: str, log: Optional[structlog.BoundLogger] = None
) -> CartState:
    """Remove a line by id. Unknown ids leave the cart unchanged."""
    log = log or logger
    if state.find(line_id) is None:
        return state

    log.info("removing_line", line_id=line_id)
    return state.with_items(item for item in state.items if item.id != line_id)
