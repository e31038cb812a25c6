# wms_state/config/__init__.py
from .settings import ApiConfig, EngineConfig, FleetConfig, PollingConfig, load_config

__all__ = ["ApiConfig", "EngineConfig", "FleetConfig", "PollingConfig", "load_config"]
