"""
Unit conversion for pipeline geometry.

Thresholds are authored in meters. The drawing source hands over coordinates
in the host's internal length unit (Revit uses decimal feet), so every length
threshold goes through meters_to_internal() once, when the thresholds are
built.
"""

from typing import Dict

# Meters per one unit of each supported internal length unit.
METERS_PER_UNIT: Dict[str, float] = {
    "m": 1.0,
    "cm": 0.01,
    "mm": 0.001,
    "ft": 0.3048,
    "in": 0.0254,
}


def _meters_per_unit(unit: str) -> float:
    try:
        return METERS_PER_UNIT[unit.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported length unit '{unit}', expected one of {sorted(METERS_PER_UNIT)}"
        ) from None


def meters_to_internal(meters: float, unit: str = "m") -> float:
    """Convert meters to the internal length unit. Single source of truth."""
    return float(meters / _meters_per_unit(unit))


def internal_to_millimeters(value: float, unit: str = "m") -> float:
    """Convert an internal length back to millimeters for reporting."""
    return float(value * _meters_per_unit(unit) * 1000.0)
