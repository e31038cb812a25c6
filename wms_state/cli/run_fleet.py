import argparse
from pathlib import Path

from wms_state.config.settings import EngineConfig, load_config
from wms_state.fleet.amr import fleet_status_counts
from wms_state.fleet.simulator import FleetSimulator
from wms_state.logging_setup import setup_logging
from wms_state.warehouse.layout import WarehouseLayout


def main():
    parser = argparse.ArgumentParser(description="Corre la simulación de flota sin UI durante N ticks.")
    parser.add_argument("--config", type=Path, help="Ruta a JSON/YAML (opcional)")
    parser.add_argument("--ticks", type=int, default=600)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--dispatch", action="append", default=[],
                        metavar="TIPO:ETIQUETA", help="p. ej. outbound:I009 (repetible)")
    args = parser.parse_args()
    setup_logging()

    cfg = EngineConfig.default() if not args.config else EngineConfig.from_dict(load_config(args.config))
    if args.seed is not None:
        cfg.fleet.seed = args.seed
    cfg.validate()

    sim = FleetSimulator(WarehouseLayout.default(), cfg.fleet)
    for item in args.dispatch:
        ttype, _, label = item.partition(":")
        amr_id = sim.dispatch(ttype, label or "-")
        print(f"Despacho {item}: {amr_id or 'sin AMR disponible'}")

    snap = sim.run_ticks(args.ticks)
    print(f"Ticks: {sim.ticks}  Estados: {fleet_status_counts(snap)}")
    for a in snap:
        print(f"{a.name:8s} {a.status:9s} ({a.position[0]:7.1f}, {a.position[1]:7.1f}) "
              f"bat={a.battery_level:5.1f}%  {a.current_task or ''}")


if __name__ == "__main__":
    main()
