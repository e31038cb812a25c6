# wms_state/config/settings.py
import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml

ChargingPolicy = Literal["manual", "on_full"]


@dataclass
class FleetConfig:
    tick_hz: float = 60.0               # "un tick por frame"
    wander_probability: float = 0.01    # por tick y por AMR idle
    trail_length: int = 10              # puntos de recorrido reciente
    channel_size: int = 8               # tamaño del canal por suscriptor
    seed: Optional[int] = None
    charging_policy: ChargingPolicy = "manual"
    charge_rate_per_tick: float = 0.0   # solo aplica con "on_full"


@dataclass
class PollingConfig:
    refresh_interval_s: float = 30.0


@dataclass
class ApiConfig:
    base_url: str = "https://smart-wms-be.p-e.kr"
    orders_path: str = "/api/inout/orders"
    timeout_s: float = 15.0


@dataclass
class EngineConfig:
    fleet: FleetConfig = field(default_factory=FleetConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "EngineConfig":
        return EngineConfig(
            fleet=FleetConfig(**(d.get("fleet") or {})),
            polling=PollingConfig(**(d.get("polling") or {})),
            api=ApiConfig(**(d.get("api") or {})),
        )

    @staticmethod
    def default() -> "EngineConfig":
        """Configuración por código (no necesitas JSON)."""
        return EngineConfig()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        f = self.fleet
        assert f.tick_hz > 0, "tick_hz debe ser > 0"
        assert 0.0 <= f.wander_probability <= 1.0, "wander_probability debe estar en [0, 1]"
        assert f.trail_length >= 1, "trail_length debe ser >= 1"
        assert f.channel_size >= 1, "channel_size debe ser >= 1"
        assert f.charging_policy in ("manual", "on_full"), f"charging_policy desconocida: {f.charging_policy}"
        if f.charging_policy == "on_full":
            assert f.charge_rate_per_tick > 0, "Con on_full, charge_rate_per_tick debe ser > 0"
        assert self.polling.refresh_interval_s > 0, "refresh_interval_s debe ser > 0"
        assert self.api.base_url, "Falta api.base_url"
        assert self.api.timeout_s > 0, "timeout_s debe ser > 0"

    def summary(self) -> str:
        f = self.fleet
        s = []
        s.append("=== CONFIGURACIÓN DEL MOTOR ===")
        s.append(f"Tick: {f.tick_hz:g} Hz  Deambular: p={f.wander_probability:g}  Rastro: {f.trail_length}")
        s.append(f"Carga: {f.charging_policy}" + (f" (+{f.charge_rate_per_tick:g}/tick)" if f.charging_policy == "on_full" else ""))
        s.append(f"Semilla: {f.seed if f.seed is not None else 'aleatoria'}")
        s.append(f"Refresco de órdenes: cada {self.polling.refresh_interval_s:g} s")
        s.append(f"API: {self.api.base_url}{self.api.orders_path} (timeout {self.api.timeout_s:g} s)")
        return "\n".join(s)


def load_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    if suffix in {".yml", ".yaml"}:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    raise ValueError(f"Formato no soportado: {path.suffix} (usa .json o .yaml)")
