"""SetQuantity cart operation."""

from dataclasses import replace
from typing import Optional

import structlog

from .state import CartState

logger = structlog.get_logger()


def set_quantity(
    state: CartState,
    line_id: str,
    quantity: int,
    log: Optional[structlog.BoundLogger] = None,
) -> CartState:
    """Set the quantity of a line; zero or less removes it."""
    log = log or logger
    if state.find(line_id) is None:
        return state

    log.info("updating_quantity", line_id=line_id, new_quantity=quantity)
    items = (
        replace(item, quantity=quantity) if item.id == line_id else item
        for item in state.items
    )
    return state.with_items(item for item in items if item.quantity > 0)
