# Unit constants. Everything is stored and computed in SI, converted for display only

import enum
import math


class UnitSystem(str, enum.Enum):
    SI = "SI"
    IMPERIAL = "IMPERIAL"


CONVERSIONS = {
    "M_TO_FT": 3.28084,
    "M2_TO_FT2": 10.7639,
    "M3_TO_FT3": 35.3147,
    "KG_TO_LB": 2.20462,
    "L_TO_GAL": 0.264172,  # US gallon
    "HA_TO_M2": 10000.0,
    "ACRE_TO_FT2": 43560.0,
}

# Multiplier from SI to imperial per quantity kind
_SI_TO_IMPERIAL = {
    "length": CONVERSIONS["M_TO_FT"],
    "area": CONVERSIONS["M2_TO_FT2"],
    "volume": CONVERSIONS["M3_TO_FT3"],
    "weight": CONVERSIONS["KG_TO_LB"],
    "liquid": CONVERSIONS["L_TO_GAL"],
}

LABELS = {
    UnitSystem.SI: {
        "length": "m",
        "area": "m²",
        "volume": "m³",
        "weight": "kg",
        "liquid": "L",
        "large_area": "hectares",
        "cement_bag": "bags (25kg)",
    },
    UnitSystem.IMPERIAL: {
        "length": "ft",
        "area": "sq ft",
        "volume": "cu ft",
        "weight": "lb",
        "liquid": "gal",
        "large_area": "acres",
        "cement_bag": "bags (55lb)",  # approx. 25 kg
    },
}


def _system(system) -> UnitSystem:
    return system if isinstance(system, UnitSystem) else UnitSystem(str(system).upper())


def convert_value(value: float, kind: str, to_system) -> float:
    """
    Convert an SI value to the target system. Identity for SI.
    Unknown kinds pass through unchanged.
    """
    if _system(to_system) == UnitSystem.SI:
        return value
    return value * _SI_TO_IMPERIAL.get(kind, 1.0)


def convert_to_si(value: float, kind: str, from_system) -> float:
    """Inverse of convert_value — user input in `from_system` back to SI."""
    if _system(from_system) == UnitSystem.SI:
        return value
    return value / _SI_TO_IMPERIAL.get(kind, 1.0)


def large_area(area_m2: float, system) -> float:
    """Area in hectares (SI) or acres (imperial)."""
    if _system(system) == UnitSystem.SI:
        return area_m2 / CONVERSIONS["HA_TO_M2"]
    return convert_value(area_m2, "area", UnitSystem.IMPERIAL) / CONVERSIONS["ACRE_TO_FT2"]


def labels_for(system) -> dict:
    return dict(LABELS[_system(system)])


def format_number(value: float, decimals: int = 2) -> str:
    """Thousands-grouped fixed-point string, e.g. 1234.5 → '1,234.50'."""
    return f"{value:,.{decimals}f}"


def parse_number(value, default: float = 0.0) -> float:
    """Parse user input as a float. Anything unparsable (None, '', 'abc', NaN) is `default`."""
    if value is None:
        return default
    try:
        number = float(str(value).strip().replace(",", "."))
    except (ValueError, TypeError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number
