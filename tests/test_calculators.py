"""
Structure calculators — slab and box volume → material quantities.
"""

import pytest

from construlab.calculators.material_config import DEFAULT_MATERIALS, resolve_config
from construlab.calculators.registry import get_calculator, has_calculator, list_calculators
from construlab.calculators.slab import SlabCalculator
from construlab.calculators.box import BoxCalculator


SQUARE_10M = [(0, 0), (150, 0), (150, 150), (0, 150)]  # 100 m² at 15 px/m


def _material(estimate, key):
    return next(m for m in estimate["materials"] if m["key"] == key)


# --- Registry ---

def test_registry_lists_both_modes():
    assert set(list_calculators()) == {"slab", "box"}
    assert has_calculator("slab")
    assert not has_calculator("stairs")


def test_unknown_mode_raises_value_error():
    with pytest.raises(ValueError):
        get_calculator("stairs")


def test_get_calculator_returns_instances():
    assert isinstance(get_calculator("slab"), SlabCalculator)
    assert isinstance(get_calculator("box"), BoxCalculator)


# --- Material config ---

def test_resolve_config_layers_overrides():
    config = resolve_config({"cement_kg_per_m3": 350}, {"sand_m3_per_m3": "0,6", "water_l_per_m3": None})
    assert config["cement_kg_per_m3"] == 350
    assert config["sand_m3_per_m3"] == pytest.approx(0.6)
    assert config["water_l_per_m3"] == DEFAULT_MATERIALS["water_l_per_m3"]


# --- Slab ---

def test_slab_from_polygon():
    result = SlabCalculator().calculate({
        "points": SQUARE_10M, "scale": 15, "is_closed": True, "thickness": 0.2,
    })
    assert result["area_m2"] == pytest.approx(100.0)
    assert result["volume_m3"] == pytest.approx(20.0)
    q = result["quantities"]
    assert q["cement_kg"] == pytest.approx(6000.0)
    assert q["cement_bags"] == 240
    assert q["sand_m3"] == pytest.approx(10.0)
    assert q["gravel_m3"] == pytest.approx(16.0)
    assert q["water_l"] == pytest.approx(3000.0)
    assert q["steel_kg_min"] == pytest.approx(1600.0)
    assert q["steel_kg_max"] == pytest.approx(2000.0)


def test_slab_open_polygon_has_zero_area():
    result = SlabCalculator().calculate({
        "points": SQUARE_10M, "scale": 15, "is_closed": False, "thickness": 0.2,
    })
    assert result["area_m2"] == 0
    assert result["volume_m3"] == 0
    assert result["quantities"]["cement_bags"] == 0


def test_slab_from_explicit_area():
    result = SlabCalculator().calculate({"area_m2": "12,5", "thickness": "0.1"})
    assert result["volume_m3"] == pytest.approx(1.25)


def test_slab_unparsable_thickness_is_zero():
    result = SlabCalculator().calculate({"area_m2": 50, "thickness": "abc"})
    assert result["volume_m3"] == 0


def test_cement_bags_round_up():
    # 0.1 m³ × 300 kg = 30 kg → 2 bags
    result = SlabCalculator().calculate({"area_m2": 1, "thickness": 0.1})
    assert result["quantities"]["cement_bags"] == 2


def test_quantities_scale_linearly_with_volume():
    small = SlabCalculator().calculate({"area_m2": 10, "thickness": 0.15})["quantities"]
    large = SlabCalculator().calculate({"area_m2": 30, "thickness": 0.15})["quantities"]
    for key in ("cement_kg", "sand_m3", "gravel_m3", "water_l", "steel_kg_min", "steel_kg_max"):
        assert large[key] == pytest.approx(small[key] * 3)


def test_slab_steel_breakdown_split():
    result = SlabCalculator().calculate({"area_m2": 10, "thickness": 0.1}, lang="en")
    breakdown = result["steel_breakdown"]
    # avg steel = (80 + 100) / 2 × 1 m³ = 90 kg
    weights = [p["weight_kg"] for p in breakdown["parts"]]
    assert weights == pytest.approx([54.0, 36.0])
    assert breakdown["parts"][0]["detail"] == "Ø10 - Ø12 // 15-20cm"


# --- Box ---

def test_box_volume_and_area():
    result = BoxCalculator().calculate({"length": 5, "width": 0.3, "height": 0.5})
    assert result["area_m2"] == pytest.approx(1.5)
    assert result["volume_m3"] == pytest.approx(0.75)


def test_box_steel_breakdown_split():
    result = BoxCalculator().calculate({"length": 1, "width": 1, "height": 1})
    weights = [p["weight_kg"] for p in result["steel_breakdown"]["parts"]]
    assert weights == pytest.approx([63.0, 27.0])


def test_negative_dimensions_clamp_to_zero():
    result = BoxCalculator().calculate({"length": -5, "width": 1, "height": 1})
    assert result["volume_m3"] == 0


def test_imperial_input_converted_to_si():
    # 10 ft × 10 ft × 1 ft = 100 cu ft ≈ 2.8317 m³
    result = BoxCalculator().calculate({
        "unit_system": "IMPERIAL", "length": 10, "width": 10, "height": 1,
    })
    assert result["volume_m3"] == pytest.approx(100 / 35.3147, rel=1e-4)
    assert result["display"]["volume"] == pytest.approx(100.0, abs=0.01)
    assert result["display"]["units"]["volume"] == "cu ft"


def test_custom_config_is_used():
    result = BoxCalculator().calculate(
        {"length": 1, "width": 1, "height": 1},
        config={"cement_kg_per_m3": 350},
    )
    assert result["quantities"]["cement_kg"] == pytest.approx(350.0)
    assert result["config"]["cement_kg_per_m3"] == 350


def test_cost_estimate():
    result = BoxCalculator().calculate({"length": 2, "width": 1, "height": 1})
    # concrete 2 m³ × 100, steel avg 180 kg × 1.5
    assert result["cost"] == {"concrete": 200.0, "steel": 270.0, "total": 470.0}


def test_labels_follow_language():
    pt = BoxCalculator().calculate({"length": 1, "width": 1, "height": 1}, lang="pt")
    en = BoxCalculator().calculate({"length": 1, "width": 1, "height": 1}, lang="en")
    assert _material(pt, "cement")["description"] != _material(en, "cement")["description"]
