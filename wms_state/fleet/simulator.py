# wms_state/fleet/simulator.py
import logging
import threading
import time
from typing import Callable, List, Optional

import numpy as np

from wms_state.config.settings import FleetConfig
from wms_state.fleet.amr import AMR, AmrSnapshot, default_fleet
from wms_state.fleet.bus import SnapshotBus, Subscription
from wms_state.fleet.dispatch import DispatchPolicy, TaskType
from wms_state.fleet.rng import RNG
from wms_state.warehouse.layout import WarehouseLayout

logger = logging.getLogger(__name__)

FleetSnapshot = List[AmrSnapshot]


class FleetSimulator:
    """
    Simulación continua de la flota de AMR.

    Un solo escritor: tick, despacho, movimiento manual y comandos de carga toman
    el mismo lock, así un despacho nunca pisa el avance de posición de un tick.
    Cada tick publica una copia inmutable de la flota en el bus.
    """

    def __init__(
        self,
        layout: WarehouseLayout,
        cfg: Optional[FleetConfig] = None,
        amrs: Optional[List[AMR]] = None,
        policy: Optional[DispatchPolicy] = None,
        bus: Optional[SnapshotBus] = None,
    ):
        self.layout = layout
        self.cfg = cfg or FleetConfig()
        self.rng = RNG(seed=self.cfg.seed)
        self.amrs: List[AMR] = amrs if amrs is not None else default_fleet(self.cfg.trail_length)
        self.policy = policy or DispatchPolicy(layout)
        self.bus: SnapshotBus = bus or SnapshotBus(maxsize=self.cfg.channel_size)
        self.ticks: int = 0

        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ----------------------- consultas -----------------------

    def snapshot(self) -> FleetSnapshot:
        with self._lock:
            return [a.snapshot() for a in self.amrs]

    def find(self, amr_id: str) -> Optional[AMR]:
        return next((a for a in self.amrs if a.id == amr_id), None)

    def subscribe(self, callback: Optional[Callable[[FleetSnapshot], None]] = None) -> Subscription:
        return self.bus.subscribe(callback)

    # ----------------------- tick -----------------------

    def _advance(self, amr: AMR) -> None:
        pos = np.array([amr.x, amr.y], dtype=float)
        delta = np.array([amr.target_x, amr.target_y], dtype=float) - pos
        distance = float(np.hypot(delta[0], delta[1]))

        if distance < amr.speed:
            # llegó: se fija exactamente en el destino
            amr.x, amr.y = amr.target_x, amr.target_y
            amr.status = "idle"
            amr.path.clear()
            return

        new_pos = pos + delta / distance * amr.speed
        amr.x, amr.y = float(new_pos[0]), float(new_pos[1])
        amr.path.append((amr.x, amr.y))

    def _wander(self, amr: AMR) -> None:
        """Marcador de posición: sin tareas en cola, a veces se va a una zona al azar."""
        zones = self.layout.zones
        if not zones or not self.rng.chance(self.cfg.wander_probability):
            return
        zone = self.rng.pick(zones)
        cx, cy = zone.centroid
        amr.set_target(cx, cy, task=f"Hacia {zone.name}")

    def _charge(self, amr: AMR) -> None:
        # "manual": nunca sale sola de la carga (ver release_from_charging)
        if self.cfg.charging_policy != "on_full":
            return
        amr.battery_level = min(100.0, amr.battery_level + self.cfg.charge_rate_per_tick)
        if amr.battery_level >= 100.0:
            amr.status = "idle"
            amr.current_task = None
            logger.info("%s terminó de cargar", amr.name)

    def tick(self) -> FleetSnapshot:
        with self._lock:
            for amr in self.amrs:
                if amr.status == "moving":
                    self._advance(amr)
                elif amr.status == "idle":
                    self._wander(amr)
                elif amr.status == "charging":
                    self._charge(amr)
            self.ticks += 1
            snap = [a.snapshot() for a in self.amrs]
        self.bus.publish(snap)
        return snap

    def run_ticks(self, n: int) -> FleetSnapshot:
        snap = self.snapshot()
        for _ in range(n):
            snap = self.tick()
        return snap

    # ----------------------- comandos -----------------------

    def move_to(self, amr_id: str, x: float, y: float) -> bool:
        """Reposicionamiento manual: fuerza destino y estado moving sin importar el estado actual."""
        with self._lock:
            amr = self.find(amr_id)
            if amr is None:
                logger.warning("move_to: AMR %s no existe", amr_id)
                return False
            amr.set_target(x, y, task="Movimiento manual")
            snap = [a.snapshot() for a in self.amrs]
        self.bus.publish(snap)
        return True

    def dispatch(self, task_type: TaskType, location_label: str) -> Optional[str]:
        with self._lock:
            amr = self.policy.assign(self.amrs, task_type, location_label)
            if amr is None:
                return None
            snap = [a.snapshot() for a in self.amrs]
        self.bus.publish(snap)
        return amr.id

    def send_to_charging(self, amr_id: str) -> bool:
        with self._lock:
            amr = self.find(amr_id)
            if amr is None or amr.status not in ("idle", "charging"):
                return False
            amr.status = "charging"
            amr.current_task = "Cargando"
            snap = [a.snapshot() for a in self.amrs]
        self.bus.publish(snap)
        return True

    def release_from_charging(self, amr_id: str) -> bool:
        with self._lock:
            amr = self.find(amr_id)
            if amr is None or amr.status != "charging":
                return False
            amr.status = "idle"
            amr.current_task = None
            logger.info("%s liberado de carga (batería %.0f%%)", amr.name, amr.battery_level)
            snap = [a.snapshot() for a in self.amrs]
        self.bus.publish(snap)
        return True

    # ----------------------- loop -----------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _loop(self) -> None:
        period = 1.0 / self.cfg.tick_hz
        while not self._stop.is_set():
            t0 = time.monotonic()
            self.tick()
            self._stop.wait(max(0.0, period - (time.monotonic() - t0)))

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="fleet-tick", daemon=True)
        self._thread.start()
        logger.info("Simulación iniciada (%d AMR, %.0f Hz)", len(self.amrs), self.cfg.tick_hz)

    def stop(self) -> None:
        """Idempotente: detener un loop ya detenido no hace nada."""
        if self._thread is None:
            return
        self._stop.set()
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout=2.0)
        self._thread = None
        logger.info("Simulación detenida tras %d ticks", self.ticks)
