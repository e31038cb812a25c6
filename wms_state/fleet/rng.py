# wms_state/fleet/rng.py
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar
import numpy as np

T = TypeVar("T")


@dataclass
class RNG:
    """RNG centralizado para que una simulación con semilla sea reproducible."""
    seed: Optional[int] = None

    def __post_init__(self):
        self._rs = np.random.default_rng(self.seed)

    def random(self, *args, **kwargs):
        return self._rs.random(*args, **kwargs)

    def integers(self, *args, **kwargs):
        return self._rs.integers(*args, **kwargs)

    def chance(self, p: float) -> bool:
        """True con probabilidad p (p <= 0 nunca, p >= 1 siempre)."""
        if p <= 0.0:
            return False
        if p >= 1.0:
            return True
        return bool(self._rs.random() < p)

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("No se puede elegir de una secuencia vacía")
        return items[int(self._rs.integers(0, len(items)))]
