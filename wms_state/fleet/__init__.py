# wms_state/fleet/__init__.py
from .amr import AMR, AmrSnapshot, default_fleet
from .bus import SnapshotBus, Subscription
from .dispatch import DispatchPolicy
from .rng import RNG
from .simulator import FleetSimulator

__all__ = [
    "AMR",
    "AmrSnapshot",
    "default_fleet",
    "SnapshotBus",
    "Subscription",
    "DispatchPolicy",
    "RNG",
    "FleetSimulator",
]
