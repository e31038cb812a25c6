import argparse
import logging
from pathlib import Path

from wms_state.config.settings import EngineConfig, load_config
from wms_state.logging_setup import setup_logging

logger = logging.getLogger("wms_state.cli.check_config")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validar la configuración del motor y mostrar el resumen.")
    parser.add_argument("--config", type=Path, help="Ruta a JSON/YAML (opcional, sin ella se usan los valores por defecto)")
    parser.add_argument("--json", action="store_true", help="Imprimir la configuración efectiva como dict")
    args = parser.parse_args(argv)
    setup_logging()

    try:
        raw = load_config(args.config) if args.config else {}
        cfg = EngineConfig.from_dict(raw)
        cfg.validate()
    except (AssertionError, TypeError, ValueError, OSError) as e:
        # TypeError: claves desconocidas en alguna sección
        logger.error("Configuración inválida: %s", e)
        return 1

    print(cfg.summary())
    if args.json:
        print(cfg.to_dict())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
