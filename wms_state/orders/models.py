# wms_state/orders/models.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

OrderType = Literal["INBOUND", "OUTBOUND"]
OrderStatus = Literal["pending", "scheduled", "rejected", "completed", "cancelled"]

ORDER_TYPES: Tuple[str, ...] = ("INBOUND", "OUTBOUND")
ORDER_STATUSES: Tuple[str, ...] = ("pending", "scheduled", "rejected", "completed", "cancelled")


@dataclass(frozen=True)
class OrderLine:
    item_id: int
    item_name: str
    requested_quantity: int
    location_code: Optional[str] = None
    specification: str = ""
    item_code: str = ""
    actual_quantity: Optional[int] = None


@dataclass(frozen=True)
class Order:
    """
    Cabecera inmutable + líneas. Solo `status` cambia localmente y siempre
    a través de orders.lifecycle.transition (que devuelve una copia).
    """
    order_id: int
    type: OrderType
    company_id: int
    created_at: datetime
    updated_at: datetime
    status: OrderStatus
    lines: Tuple[OrderLine, ...] = field(default_factory=tuple)
    company_name: str = ""

    def with_status(self, status: OrderStatus, updated_at: Optional[datetime] = None) -> "Order":
        return replace(self, status=status, updated_at=updated_at or self.updated_at)

    @property
    def is_inbound(self) -> bool:
        return self.type == "INBOUND"


# ---------------- parsing de payloads de la API ----------------

def parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if not raw:
        return datetime.min
    s = str(raw).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    # normalizamos a naive para poder comparar timestamps de distintas fuentes
    return dt.replace(tzinfo=None) if dt.tzinfo is not None else dt


def _int_or_zero(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def line_from_api(d: Dict[str, Any], default_location: Optional[str] = None) -> OrderLine:
    actual = d.get("actualQuantity")
    return OrderLine(
        item_id=_int_or_zero(d.get("itemId")),
        item_name=str(d.get("itemName") or ""),
        requested_quantity=_int_or_zero(d.get("requestedQuantity")),
        location_code=d.get("locationCode") or default_location,
        specification=str(d.get("specification") or ""),
        item_code=str(d.get("itemCode") or ""),
        actual_quantity=None if actual is None else _int_or_zero(actual),
    )


def order_from_api(d: Dict[str, Any]) -> Order:
    """
    Convierte la respuesta de `GET orders` (camelCase, status/type en mayúsculas)
    a un Order. La ubicación puede venir por línea o a nivel de orden.
    """
    otype = str(d.get("type", "")).upper()
    if otype not in ORDER_TYPES:
        raise ValueError(f"Tipo de orden no soportado: {d.get('type')!r}")
    status = str(d.get("status", "")).lower()
    if status not in ORDER_STATUSES:
        raise ValueError(f"Estado de orden no soportado: {d.get('status')!r}")

    created = parse_timestamp(d.get("createdAt"))
    updated = parse_timestamp(d.get("updatedAt") or d.get("createdAt"))
    default_location = d.get("locationCode")
    lines: List[OrderLine] = [line_from_api(it, default_location) for it in d.get("items") or []]
    return Order(
        order_id=int(d["orderId"]),
        type=otype,
        company_id=_int_or_zero(d.get("companyId")),
        created_at=created,
        updated_at=updated,
        status=status,
        lines=tuple(lines),
        company_name=str(d.get("companyName") or ""),
    )


def status_to_api(status: OrderStatus) -> str:
    return status.upper()
