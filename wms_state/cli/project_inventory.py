import argparse
import json
from pathlib import Path

from wms_state.inventory.projector import occupancy_summary, project_inventory, projection_frame
from wms_state.logging_setup import setup_logging
from wms_state.orders.models import order_from_api


def main():
    parser = argparse.ArgumentParser(description="Proyecta stock por ubicación desde un volcado JSON de órdenes.")
    parser.add_argument("orders", type=Path, help="JSON con la respuesta de GET orders")
    parser.add_argument("--out", type=Path, help="CSV de salida (opcional)")
    args = parser.parse_args()
    setup_logging()

    raw = json.loads(args.orders.read_text(encoding="utf-8"))
    orders = [order_from_api(d) for d in (raw.get("data", []) if isinstance(raw, dict) else raw)]
    projection = project_inventory(orders)
    df = projection_frame(projection)

    print(f"Órdenes: {len(orders)}  {occupancy_summary(projection)}")
    print(df.to_string(index=False))
    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.out, index=False)
        print(f"[OK] CSV → {args.out}")


if __name__ == "__main__":
    main()
