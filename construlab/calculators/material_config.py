"""
Material ratios per m³ of concrete, with a fallback chain:
1. Explicit overrides from the request
2. A named preset from the material_presets table
3. DEFAULT_MATERIALS from this file

Costs are placeholders — update the preset with local supplier prices.
"""

from ..units import parse_number

DEFAULT_MATERIALS = {
    "cement_kg_per_m3": 300.0,
    "sand_m3_per_m3": 0.5,
    "gravel_m3_per_m3": 0.8,
    "water_l_per_m3": 150.0,
    "steel_kg_per_m3_min": 80.0,
    "steel_kg_per_m3_max": 100.0,
    "cost_concrete_per_m3": 100.0,
    "cost_steel_per_kg": 1.5,
}

CONFIG_KEYS = tuple(DEFAULT_MATERIALS.keys())


def preset_to_config(preset) -> dict:
    """MaterialPreset row → plain config dict."""
    return {key: getattr(preset, key) for key in CONFIG_KEYS}


def resolve_config(base: dict = None, overrides: dict = None) -> dict:
    """Layer base preset and overrides on top of the defaults. None values are skipped."""
    config = dict(DEFAULT_MATERIALS)
    for layer in (base, overrides):
        if not layer:
            continue
        for key in CONFIG_KEYS:
            if layer.get(key) is not None:
                config[key] = parse_number(layer[key])
    return config
