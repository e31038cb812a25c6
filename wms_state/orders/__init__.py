# wms_state/orders/__init__.py
from .models import Order, OrderLine, OrderStatus, OrderType, order_from_api
from .lifecycle import (
    TRANSITIONS,
    TransitionOutcome,
    can_transition,
    is_actionable,
    is_terminal,
    transition,
)

__all__ = [
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderType",
    "order_from_api",
    "TRANSITIONS",
    "TransitionOutcome",
    "can_transition",
    "is_actionable",
    "is_terminal",
    "transition",
]
