# wms_state/warehouse/layout.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple

Point = Tuple[float, float]  # (x, y) en unidades del plano (px del layout)

ZoneType = Literal["storage", "loading", "charging", "office", "unloading"]
ObstacleType = Literal["wall", "shelf", "equipment"]


@dataclass(frozen=True)
class Zone:
    id: str
    name: str
    x: float
    y: float
    width: float
    height: float
    type: ZoneType
    color: str = "#9e9e9e"

    @property
    def centroid(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, p: Point) -> bool:
        return self.x <= p[0] <= self.x + self.width and self.y <= p[1] <= self.y + self.height


@dataclass(frozen=True)
class Obstacle:
    id: str
    x: float
    y: float
    width: float
    height: float
    type: ObstacleType

    def contains(self, p: Point) -> bool:
        return self.x <= p[0] <= self.x + self.width and self.y <= p[1] <= self.y + self.height


def _storage(n: int) -> Dict[str, Any]:
    return {
        "id": f"storage-{n}", "name": f"Almacén {n}",
        "x": 50 + 100 * (n - 1), "y": 50, "width": 80, "height": 200,
        "type": "storage", "color": "#2196f3",
    }


def _shelf(n: int) -> Dict[str, Any]:
    # pares de estantes: 250/290, 350/390, ... 650/690
    pair, side = divmod(n - 1, 2)
    return {"id": f"shelf-{n}", "x": 250 + 100 * pair + 40 * side, "y": 350,
            "width": 30, "height": 80, "type": "shelf"}


@dataclass
class WarehouseLayout:
    """
    Layout estático del almacén con un 'spec' estilo dict:

    spec = {
        "width": float,
        "height": float,
        "zones": List[dict(id, name, x, y, width, height, type, color)],
        "obstacles": List[dict(id, x, y, width, height, type)],
        "unloading_approach": {"x": float, "y": float}   # opcional
    }

    Nunca se modifica en tiempo de ejecución; solo se usa para elegir destinos.
    """
    spec: Dict[str, Any]

    # --------- constructores ---------
    @staticmethod
    def default_spec() -> Dict[str, Any]:
        return {
            "width": 1000,
            "height": 700,
            "zones": [_storage(n) for n in range(1, 9)] + [
                {"id": "outbound-dock", "name": "Muelle de salida", "x": 50, "y": 350,
                 "width": 150, "height": 120, "type": "loading", "color": "#ffeb3b"},
                {"id": "unloading-dock", "name": "Muelle de descarga", "x": 850, "y": 350,
                 "width": 100, "height": 200, "type": "unloading", "color": "#f44336"},
            ],
            "obstacles": [_shelf(n) for n in range(1, 11)],
            # punto de espera junto al muelle de descarga para tareas de entrada
            "unloading_approach": {"x": 900, "y": 450},
        }

    @staticmethod
    def default() -> "WarehouseLayout":
        return WarehouseLayout(WarehouseLayout.default_spec())

    # --------- helpers básicos ---------
    @property
    def width(self) -> float:
        return float(self.spec.get("width", 0))

    @property
    def height(self) -> float:
        return float(self.spec.get("height", 0))

    @property
    def zones(self) -> List[Zone]:
        return [Zone(**z) for z in self.spec.get("zones", []) or []]

    @property
    def obstacles(self) -> List[Obstacle]:
        return [Obstacle(**o) for o in self.spec.get("obstacles", []) or []]

    def in_bounds(self, p: Point) -> bool:
        return 0 <= p[0] <= self.width and 0 <= p[1] <= self.height

    def blocked(self, p: Point) -> bool:
        return any(o.contains(p) for o in self.obstacles)

    # --------- búsqueda de zonas ---------
    def zone_by_id(self, zone_id: str) -> Optional[Zone]:
        return next((z for z in self.zones if z.id == zone_id), None)

    def zone_by_name(self, name: str) -> Optional[Zone]:
        return next((z for z in self.zones if z.name == name), None)

    def zones_of_type(self, ztype: ZoneType) -> List[Zone]:
        return [z for z in self.zones if z.type == ztype]

    def outbound_dock(self) -> Zone:
        z = self.zone_by_id("outbound-dock") or next(iter(self.zones_of_type("loading")), None)
        if z is None:
            raise ValueError("El layout no define un muelle de salida (zona 'loading').")
        return z

    def unloading_approach(self) -> Point:
        ap = self.spec.get("unloading_approach")
        if isinstance(ap, dict) and "x" in ap and "y" in ap:
            return float(ap["x"]), float(ap["y"])
        dock = next(iter(self.zones_of_type("unloading")), None)
        if dock is None:
            raise ValueError("El layout no define un muelle de descarga (zona 'unloading').")
        return dock.centroid
