# wms_state/errors.py
from typing import Optional


class WarehouseStateError(Exception):
    """Base de todos los errores del motor de estado del almacén."""


class MalformedLocationCode(WarehouseStateError):
    def __init__(self, code: object):
        self.code = code
        super().__init__(f"Código de ubicación inválido: {code!r}")


class InvalidTransition(WarehouseStateError):
    """Transición de estado no permitida; la orden queda sin cambios."""

    def __init__(self, order_id: int, from_status: str, to_status: str):
        self.order_id = order_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Orden {order_id}: transición no permitida {from_status} -> {to_status}"
        )


class NoAvailableAmr(WarehouseStateError):
    def __init__(self, task_type: str, location_label: str):
        self.task_type = task_type
        self.location_label = location_label
        super().__init__(f"No hay AMR disponible para {location_label} {task_type}")


class StaleSnapshot(WarehouseStateError):
    """La última actualización falló; se siguen sirviendo los datos previos."""

    def __init__(self, reason: str, last_success: Optional[float] = None):
        self.reason = reason
        self.last_success = last_success
        super().__init__(f"Datos desactualizados: {reason}")


class UnknownOrder(WarehouseStateError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Orden desconocida: {order_id}")
