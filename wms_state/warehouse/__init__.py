# wms_state/warehouse/__init__.py
from .layout import Obstacle, WarehouseLayout, Zone

__all__ = ["Obstacle", "WarehouseLayout", "Zone"]
