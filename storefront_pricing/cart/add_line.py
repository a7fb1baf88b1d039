"""AddLine cart operation."""

import uuid
from dataclasses import replace
from typing import Optional

import structlog

from .state import CartState, LineItem, ProductRef

logger = structlog.get_logger()


def new_line_id(product: ProductRef) -> str:
    return f"{product.product_id}-{uuid.uuid4().hex[:12]}"


def add_line(
    state: CartState,
    product: ProductRef,
    quantity: int = 1,
    selected_size: Optional[str] = None,
    selected_color: Optional[str] = None,
    custom_design: Optional[str] = None,
    payment_method: Optional[str] = None,
    log: Optional[structlog.BoundLogger] = None,
) -> CartState:
    """Add a product to the cart, merging into an identical line if present.

    Lines merge only when product, custom design, size, color and payment
    method all match. Quantity is not validated here.
    """
    log = log or logger
    candidate = LineItem(
        id="",
        product=product,
        quantity=quantity,
        selected_size=selected_size,
        selected_color=selected_color,
        custom_design=custom_design,
        payment_method=payment_method,
    )
    key = candidate.merge_key()

    existing = next((item for item in state.items if item.merge_key() == key), None)
    if existing is not None:
        log.info(
            "merging_line",
            line_id=existing.id,
            product_id=product.product_id,
            quantity=existing.quantity + quantity,
        )
        items = [
            replace(item, quantity=item.quantity + quantity) if item.id == existing.id else item
            for item in state.items
        ]
        return state.with_items(items)

    line = replace(candidate, id=new_line_id(product))
    log.info("adding_line", line_id=line.id, product_id=product.product_id, quantity=quantity)
    return state.with_items([*state.items, line])
