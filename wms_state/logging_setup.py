# wms_state/logging_setup.py
from __future__ import annotations
import logging, logging.handlers
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    """Consola siempre; archivo rotativo (5 MB x 3) solo si se pasa log_file."""
    fmt = logging.Formatter(LOG_FORMAT)
    logger = logging.getLogger("wms_state")
    logger.setLevel(level)

    # evitar handlers duplicados si se llama más de una vez
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        logger.addHandler(console)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        already = any(
            isinstance(h, logging.handlers.RotatingFileHandler)
            and getattr(h, "baseFilename", "") == str(log_path.resolve())
            for h in logger.handlers
        )
        if not already:
            handler = logging.handlers.RotatingFileHandler(
                log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
            )
            handler.setFormatter(fmt)
            logger.addHandler(handler)

    return logger
