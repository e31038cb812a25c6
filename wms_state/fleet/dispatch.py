# wms_state/fleet/dispatch.py
import logging
from typing import Iterable, Literal, Optional, Tuple

from wms_state.fleet.amr import AMR
from wms_state.warehouse.layout import WarehouseLayout

logger = logging.getLogger(__name__)

TaskType = Literal["inbound", "outbound"]


def normalize_task_type(task_type: str) -> TaskType:
    t = str(task_type).strip().lower()
    if t not in ("inbound", "outbound"):
        raise ValueError(f"Tipo de tarea no soportado: {task_type!r}")
    return t


class DispatchPolicy:
    """
    Primer AMR `idle` en orden de iteración; sin balanceo de carga ni distancia.
    Un AMR en tarea nunca se reasigna.
    """

    def __init__(self, layout: WarehouseLayout):
        self.layout = layout

    def target_for(self, task_type: TaskType) -> Tuple[float, float]:
        if task_type == "inbound":
            # entrada: se arranca junto al muelle de descarga
            return self.layout.unloading_approach()
        return self.layout.outbound_dock().centroid

    @staticmethod
    def first_idle(amrs: Iterable[AMR]) -> Optional[AMR]:
        return next((a for a in amrs if a.status == "idle"), None)

    def assign(self, amrs: Iterable[AMR], task_type: str, location_label: str) -> Optional[AMR]:
        """Muta el AMR elegido (destino, etiqueta, moving) o devuelve None si no hay libre."""
        ttype = normalize_task_type(task_type)
        amr = self.first_idle(amrs)
        if amr is None:
            logger.info("Sin AMR disponible para %s %s", location_label, ttype)
            return None
        tx, ty = self.target_for(ttype)
        amr.set_target(tx, ty, task=f"{location_label} {ttype}")
        logger.info("%s asignado: %s %s -> (%.0f, %.0f)", amr.name, location_label, ttype, tx, ty)
        return amr
