"""
Measurement, page size and lenient number parsing.

Conversion factors must stay exactly as the renderer expects them:
1in = 72pt, 1cm = 72/2.54pt, 1mm = 72/25.4pt.
"""
import re

from .config import Configuration


POINTS_PER_INCH = 72.0
POINTS_PER_CM = 72.0 / 2.54
POINTS_PER_MM = 72.0 / 25.4

# name: (width, length) in points
PAGE_SIZES: dict[str, tuple[int, int]] = {
    "letter": (612, 792),
    "legal": (612, 1008),
    "a4": (595, 842),
    "universal": (595, 792),
}

_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"\s*[+-]?\d+")
_SIZE_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))x([+-]?(?:\d+\.?\d*|\.\d+))(\S*)", re.IGNORECASE)


def parse_float(text: str) -> float:
    """Leading decimal number of `text`, 0.0 if there is none (like C atof)."""
    match = _FLOAT_RE.match(text)
    return float(match.group()) if match else 0.0


def parse_int(text: str) -> int:
    """Leading integer of `text`, 0 if there is none (like C atoi)."""
    match = _INT_RE.match(text)
    return int(match.group()) if match else 0


def _unit_factor(units: str, default: float) -> float:
    units = units.lower()
    if units == "mm":
        return POINTS_PER_MM
    if units == "cm":
        return POINTS_PER_CM
    if units.startswith("in"):
        return POINTS_PER_INCH
    return default


def get_measurement(text: str, mul: float = 1.0) -> int:
    """
    Converts "1in", "2.5cm", "10mm" or a bare number to whole points.
    Bare numbers are multiplied by `mul`.
    """
    match = _FLOAT_RE.match(text)
    if not match:
        return 0
    value = float(match.group())
    units = text[match.end():].strip()
    return int(value * _unit_factor(units, mul))


def set_page_size(config: Configuration, size: str):
    """Sets page width/length from a size name or a "WxH[units]" string."""
    named = PAGE_SIZES.get(size.lower())
    if named:
        config.page_width, config.page_length = named
        return

    match = _SIZE_RE.match(size)
    if not match:
        return
    factor = _unit_factor(match.group(3), 1.0)
    config.page_width = int(float(match.group(1)) * factor)
    config.page_length = int(float(match.group(2)) * factor)
