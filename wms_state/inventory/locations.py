# wms_state/inventory/locations.py
import re
from typing import Tuple

from wms_state.errors import MalformedLocationCode

# sección (letras) + posición de 1 a 3 dígitos, p. ej. "I009"
LOCATION_RE = re.compile(r"^([A-Z]+)([0-9]{1,3})$")
_SEPARATORS = re.compile(r"[\s\-_./:]+")


def normalize_location_code(raw: object) -> str:
    """Quita separadores y pasa a mayúsculas. No valida."""
    if raw is None:
        return ""
    return _SEPARATORS.sub("", str(raw)).upper()


def is_valid_location_code(raw: object) -> bool:
    return LOCATION_RE.match(normalize_location_code(raw)) is not None


def parse_location_code(raw: object) -> str:
    code = normalize_location_code(raw)
    if not LOCATION_RE.match(code):
        raise MalformedLocationCode(raw)
    return code


def split_location_code(raw: object) -> Tuple[str, int]:
    m = LOCATION_RE.match(parse_location_code(raw))
    return m.group(1), int(m.group(2))


def rack_code(section: str, position: int) -> str:
    """("a", 1) -> "A001"."""
    if not 0 <= int(position) <= 999:
        raise MalformedLocationCode(f"{section}{position}")
    return parse_location_code(f"{section}{int(position):03d}")
