# wms_state/engine/__init__.py
from .facade import TransitionResult, WarehouseState

__all__ = ["TransitionResult", "WarehouseState"]
