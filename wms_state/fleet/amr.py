# wms_state/fleet/amr.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Literal, Optional, Tuple

Point = Tuple[float, float]
AmrStatus = Literal["idle", "moving", "loading", "unloading", "charging"]

# loading/unloading están declarados pero ninguna transición los usa todavía
AMR_STATUSES: Tuple[str, ...] = ("idle", "moving", "loading", "unloading", "charging")
DEFAULT_TRAIL = 10


@dataclass
class AMR:
    """Robot móvil autónomo. Lo muta solo el simulador (tick, despacho o movimiento manual)."""
    id: str
    name: str
    x: float
    y: float
    target_x: float
    target_y: float
    status: AmrStatus = "idle"
    battery_level: float = 100.0
    speed: float = 2.0
    color: str = "#2196f3"
    current_task: Optional[str] = None
    trail_limit: int = DEFAULT_TRAIL
    path: Deque[Point] = field(default_factory=deque)

    def __post_init__(self):
        if not self.speed > 0:
            raise ValueError(f"{self.name}: speed debe ser > 0 (recibido {self.speed})")
        # el deque acotado descarta el punto más viejo al superar el límite
        self.path = deque(self.path, maxlen=self.trail_limit)

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def target(self) -> Point:
        return (self.target_x, self.target_y)

    def distance_to_target(self) -> float:
        return float(((self.target_x - self.x) ** 2 + (self.target_y - self.y) ** 2) ** 0.5)

    def set_target(self, x: float, y: float, task: Optional[str] = None) -> None:
        self.target_x = float(x)
        self.target_y = float(y)
        self.status = "moving"
        if task is not None:
            self.current_task = task

    def snapshot(self) -> "AmrSnapshot":
        return AmrSnapshot(
            id=self.id,
            name=self.name,
            position=(self.x, self.y),
            target=(self.target_x, self.target_y),
            status=self.status,
            battery_level=self.battery_level,
            speed=self.speed,
            recent_path=tuple(self.path),
            current_task=self.current_task,
            color=self.color,
        )


@dataclass(frozen=True)
class AmrSnapshot:
    """Copia inmutable de un AMR que se entrega a suscriptores y consultas."""
    id: str
    name: str
    position: Point
    target: Point
    status: AmrStatus
    battery_level: float
    speed: float
    recent_path: Tuple[Point, ...]
    current_task: Optional[str]
    color: str


def default_fleet(trail_limit: int = DEFAULT_TRAIL) -> List[AMR]:
    """Flota inicial: 8 AMR en fila (y=500), AMR-007 arranca cargando."""
    specs = [
        ("#2196f3", 85), ("#4caf50", 92), ("#ff9800", 78), ("#9c27b0", 65),
        ("#00bcd4", 88), ("#795548", 73), ("#607d8b", 45), ("#e91e63", 91),
    ]
    fleet: List[AMR] = []
    for i, (color, battery) in enumerate(specs, 1):
        x = 100.0 * i
        fleet.append(AMR(
            id=f"amr-{i}",
            name=f"AMR-{i:03d}",
            x=x, y=500.0, target_x=x, target_y=500.0,
            status="charging" if i == 7 else "idle",
            battery_level=float(battery),
            speed=2.0,
            color=color,
            trail_limit=trail_limit,
        ))
    return fleet


def fleet_status_counts(snapshots: List[AmrSnapshot]) -> Dict[str, int]:
    counts = {s: 0 for s in AMR_STATUSES}
    for snap in snapshots:
        counts[snap.status] = counts.get(snap.status, 0) + 1
    return counts
