# wms_state/inventory/__init__.py
from .locations import normalize_location_code, parse_location_code, rack_code, is_valid_location_code
from .projector import InventoryProjectionEntry, CachedProjector, project_inventory

__all__ = [
    "normalize_location_code",
    "parse_location_code",
    "rack_code",
    "is_valid_location_code",
    "InventoryProjectionEntry",
    "CachedProjector",
    "project_inventory",
]
