# wms_state/__init__.py
from .engine.facade import TransitionResult, WarehouseState

__all__ = ["TransitionResult", "WarehouseState"]
