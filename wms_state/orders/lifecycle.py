# wms_state/orders/lifecycle.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional

from wms_state.errors import InvalidTransition
from wms_state.orders.models import Order, OrderStatus

logger = logging.getLogger(__name__)

# pending -> scheduled | rejected ; scheduled -> completed | cancelled ; el resto es terminal
TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"scheduled", "rejected"}),
    "scheduled": frozenset({"completed", "cancelled"}),
    "rejected": frozenset(),
    "completed": frozenset(),
    "cancelled": frozenset(),
}

ACTIONABLE: FrozenSet[str] = frozenset({"pending", "scheduled"})
TERMINAL: FrozenSet[str] = frozenset({"rejected", "completed", "cancelled"})


@dataclass(frozen=True)
class StatusInfo:
    label: str
    description: str
    priority: int  # orden para listados (menor = primero)


STATUS_INFO: Dict[str, StatusInfo] = {
    "pending": StatusInfo("Pendiente", "Esperando aprobación del administrador", 1),
    "scheduled": StatusInfo("Programada", "Aprobada y programada para ejecución", 3),
    "completed": StatusInfo("Completada", "Trabajo terminado", 4),
    "cancelled": StatusInfo("Cancelada", "Trabajo cancelado", 5),
    "rejected": StatusInfo("Rechazada", "Rechazada por el administrador", 6),
}


@dataclass(frozen=True)
class TransitionOutcome:
    order: Order
    message: str
    changed: bool


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def is_actionable(status: str) -> bool:
    return status in ACTIONABLE


def is_terminal(status: str) -> bool:
    return status in TERMINAL


def status_change_message(from_status: str, to_status: str, actor: str = "administrador") -> str:
    """Mensaje de auditoría para el historial de la orden."""
    a = STATUS_INFO.get(from_status)
    b = STATUS_INFO.get(to_status)
    if a is None or b is None:
        return "Estado modificado"

    specific = {
        ("pending", "scheduled"): f"{actor} aprobó la orden pendiente y la dejó programada.",
        ("pending", "rejected"): f"{actor} rechazó la orden pendiente.",
        ("scheduled", "completed"): f"{actor} marcó como completada la orden programada.",
        ("scheduled", "cancelled"): f"{actor} canceló la orden programada.",
    }
    return specific.get(
        (from_status, to_status),
        f"{actor} cambió el estado de {a.label} a {b.label}.",
    )


def transition(
    order: Order,
    target: OrderStatus,
    actor: str = "administrador",
    now: Optional[datetime] = None,
) -> TransitionOutcome:
    """
    Aplica una transición explícita. Repetir el estado actual es un no-op exitoso
    (tolera llamadas duplicadas del cliente). Si no está en la tabla lanza
    InvalidTransition y la orden original no se toca.
    """
    if order.status == target:
        return TransitionOutcome(order=order, message=f"Orden {order.order_id} ya está en {target}", changed=False)

    if not can_transition(order.status, target):
        logger.warning("Orden %s: transición rechazada %s -> %s", order.order_id, order.status, target)
        raise InvalidTransition(order.order_id, order.status, target)

    updated = order.with_status(target, updated_at=now)
    msg = status_change_message(order.status, target, actor)
    logger.info("Orden %s: %s -> %s", order.order_id, order.status, target)
    return TransitionOutcome(order=updated, message=msg, changed=True)


def actionable_orders(orders: Iterable[Order]) -> List[Order]:
    return [o for o in orders if is_actionable(o.status)]


def sort_orders_by_status(orders: Iterable[Order]) -> List[Order]:
    """Prioridad de estado y, a igual prioridad, la más reciente primero."""
    newest_first = sorted(orders, key=lambda o: o.updated_at, reverse=True)
    # sorted es estable: dentro de cada prioridad se conserva el orden por fecha
    return sorted(
        newest_first,
        key=lambda o: STATUS_INFO[o.status].priority if o.status in STATUS_INFO else 999,
    )
