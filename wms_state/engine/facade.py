# wms_state/engine/facade.py
from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

import requests

from wms_state.config.settings import EngineConfig
from wms_state.errors import InvalidTransition, NoAvailableAmr, StaleSnapshot, UnknownOrder, WarehouseStateError
from wms_state.fleet.amr import AmrSnapshot, fleet_status_counts
from wms_state.fleet.simulator import FleetSimulator
from wms_state.inventory.locations import is_valid_location_code, normalize_location_code
from wms_state.inventory.projector import (
    CachedProjector,
    InventoryProjectionEntry,
    Projection,
    occupancy_summary,
    query_location,
)
from wms_state.orders.lifecycle import actionable_orders, is_actionable, transition
from wms_state.orders.models import Order, OrderStatus
from wms_state.warehouse.layout import WarehouseLayout

logger = logging.getLogger(__name__)

# errores de una actualización que dejan los datos previos en pie
REFRESH_ERRORS = (requests.RequestException, ValueError, WarehouseStateError)


class OrderSource(Protocol):
    def fetch_orders(self) -> List[Order]: ...
    def update_status(self, order_id: int, status: OrderStatus) -> None: ...


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    order: Optional[Order]
    message: str
    error: Optional[WarehouseStateError] = None
    synced: bool = False  # True si la API aceptó el cambio


class WarehouseState:
    """
    Fachada que compone proyector, máquina de estados y simulador de flota.

    Ninguna operación lanza hacia el proceso anfitrión: los fallos vuelven como
    valores (TransitionResult, None, `stale`).
    """

    def __init__(
        self,
        source: OrderSource,
        layout: Optional[WarehouseLayout] = None,
        cfg: Optional[EngineConfig] = None,
        simulator: Optional[FleetSimulator] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cfg = cfg or EngineConfig.default()
        self.source = source
        self.layout = layout or WarehouseLayout.default()
        self.simulator = simulator or FleetSimulator(self.layout, self.cfg.fleet)
        self.clock = clock

        self._projector = CachedProjector()
        self._orders: Dict[int, Order] = {}
        self._lock = threading.Lock()
        self.stale: Optional[StaleSnapshot] = None
        self.last_success: Optional[float] = None
        self.last_dispatch_error: Optional[NoAvailableAmr] = None

        self._poll_stop = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None

    # ----------------------- órdenes -----------------------

    def refresh(self) -> bool:
        """Trae la lista de órdenes. Si falla se conservan las últimas buenas."""
        try:
            fetched = self.source.fetch_orders()
        except REFRESH_ERRORS as e:
            self.stale = StaleSnapshot(str(e), self.last_success)
            logger.warning("Refresco de órdenes falló, se sirven datos previos: %s", e)
            return False
        with self._lock:
            self._orders = {o.order_id: o for o in fetched}
        self.last_success = self.clock()
        self.stale = None
        return True

    def orders(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    def order(self, order_id: int) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def actionable(self) -> List[Order]:
        return actionable_orders(self.orders())

    def request_transition(self, order_id: int, target: OrderStatus, actor: str = "administrador") -> TransitionResult:
        """
        Valida y aplica localmente (optimista) y luego avisa a la API.
        Si la API falla el cambio local se mantiene; el próximo refresh manda.
        """
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                err = UnknownOrder(order_id)
                return TransitionResult(ok=False, order=None, message=str(err), error=err)
            try:
                outcome = transition(current, target, actor=actor)
            except InvalidTransition as e:
                return TransitionResult(ok=False, order=current, message=str(e), error=e)
            self._orders[order_id] = outcome.order

        if not outcome.changed:
            return TransitionResult(ok=True, order=outcome.order, message=outcome.message)

        synced = True
        try:
            self.source.update_status(order_id, target)
        except REFRESH_ERRORS as e:
            synced = False
            logger.warning("Orden %s: la API no confirmó %s (%s)", order_id, target, e)
        return TransitionResult(ok=True, order=outcome.order, message=outcome.message, synced=synced)

    # ----------------------- inventario -----------------------

    def projection(self) -> Projection:
        return self._projector.project(self.orders())

    def query_location(self, code: str) -> List[InventoryProjectionEntry]:
        return query_location(self.projection(), code)

    def occupancy(self) -> Dict[str, int]:
        return occupancy_summary(self.projection())

    # ----------------------- flota -----------------------

    def list_amrs(self) -> List[AmrSnapshot]:
        return self.simulator.snapshot()

    def fleet_counts(self) -> Dict[str, int]:
        return fleet_status_counts(self.list_amrs())

    def subscribe_amr_updates(self, callback: Callable[[List[AmrSnapshot]], None]) -> Callable[[], None]:
        sub = self.simulator.subscribe(callback)
        return sub.unsubscribe

    def move_amr(self, amr_id: str, x: float, y: float) -> bool:
        return self.simulator.move_to(amr_id, x, y)

    def dispatch(self, task_type: str, location_label: str) -> Optional[str]:
        """id del AMR asignado, o None (el motivo queda en `last_dispatch_error`)."""
        self.last_dispatch_error = None
        try:
            amr_id = self.simulator.dispatch(task_type, location_label)
        except ValueError as e:
            logger.warning("Despacho rechazado: %s", e)
            return None
        if amr_id is None:
            self.last_dispatch_error = NoAvailableAmr(task_type, location_label)
        return amr_id

    def dispatch_order(self, order_id: int) -> Optional[str]:
        """Despacha un AMR para una orden aún accionable, etiquetada con su ubicación."""
        o = self.order(order_id)
        if o is None or not is_actionable(o.status):
            logger.info("Orden %s no es accionable; no se despacha", order_id)
            return None
        codes = [normalize_location_code(l.location_code) for l in o.lines if is_valid_location_code(l.location_code)]
        label = codes[0] if codes else f"Orden {o.order_id}"
        if not o.is_inbound and codes:
            stocked = {e.item_id: e.quantity for e in self.query_location(codes[0])}
            short = [l.item_id for l in o.lines if stocked.get(l.item_id, 0) < l.requested_quantity]
            if short:
                logger.warning("Orden %s: stock insuficiente en %s para ítems %s", o.order_id, label, short)
        return self.dispatch("inbound" if o.is_inbound else "outbound", label)

    # ----------------------- ciclo de vida -----------------------

    def _poll_loop(self) -> None:
        interval = self.cfg.polling.refresh_interval_s
        while not self._poll_stop.wait(interval):
            try:
                self.refresh()
            except Exception as e:
                # un fallo inesperado no debe cortar el sondeo
                self.stale = StaleSnapshot(str(e), self.last_success)
                logger.exception("Refresco de órdenes falló de forma inesperada")

    def start(self, poll: bool = True) -> None:
        self.refresh()
        self.simulator.start()
        if poll and (self._poll_thread is None or not self._poll_thread.is_alive()):
            self._poll_stop.clear()
            self._poll_thread = threading.Thread(target=self._poll_loop, name="order-poll", daemon=True)
            self._poll_thread.start()

    def stop(self) -> None:
        self.simulator.stop()
        if self._poll_thread is not None:
            self._poll_stop.set()
            self._poll_thread.join(timeout=2.0)
            self._poll_thread = None
