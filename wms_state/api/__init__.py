# wms_state/api/__init__.py
from .orders_client import InMemoryOrderSource, OrderApiClient

__all__ = ["InMemoryOrderSource", "OrderApiClient"]
