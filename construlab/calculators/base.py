"""
Abstract base class for the structure calculators.

Input: fields dict (dimensions in the request's unit system, geometry payload)
Output: Estimate dict — SI quantities plus display values in the requested system
"""

import logging
import math
from abc import ABC, abstractmethod

from .. import units
from ..i18n import t
from ..units import UnitSystem
from .material_config import resolve_config

logger = logging.getLogger(__name__)


class BaseCalculator(ABC):
    """All structure calculators inherit from this."""

    MODE = ""
    BAG_KG = 25.0           # Cement sold in 25 kg bags
    BREAKDOWN_TYPE = ""     # i18n key for the steel breakdown title
    # (i18n key, bar spec, share of average steel)
    STEEL_SPLIT = ()

    @abstractmethod
    def calculate(self, fields: dict, config: dict = None, lang: str = "pt") -> dict:
        """
        Takes the answered fields from the estimate request.
        Returns an Estimate dict built with make_estimate().
        """
        pass

    # --- Helper methods for all calculators ---

    def unit_system(self, fields: dict) -> UnitSystem:
        value = fields.get("unit_system") or UnitSystem.SI
        try:
            return UnitSystem(str(getattr(value, "value", value)).upper())
        except ValueError:
            return UnitSystem.SI

    def parse_number(self, value, default: float = 0.0) -> float:
        """Parse a numeric value from user input. Unparsable → default."""
        return units.parse_number(value, default)

    def parse_length(self, value, system: UnitSystem) -> float:
        """Parse a length in the user's unit system and return meters. Negative → 0."""
        length = self.parse_number(value)
        if length < 0:
            return 0.0
        return units.convert_to_si(length, "length", system)

    def derive_materials(self, volume_m3: float, config: dict) -> dict:
        """Ratio-based quantities for a concrete volume. Everything but bags is linear in volume."""
        cement_kg = volume_m3 * config["cement_kg_per_m3"]
        return {
            "cement_kg": cement_kg,
            "cement_bags": self.cement_bags(cement_kg),
            "sand_m3": volume_m3 * config["sand_m3_per_m3"],
            "gravel_m3": volume_m3 * config["gravel_m3_per_m3"],
            "water_l": volume_m3 * config["water_l_per_m3"],
            "steel_kg_min": volume_m3 * config["steel_kg_per_m3_min"],
            "steel_kg_max": volume_m3 * config["steel_kg_per_m3_max"],
        }

    def cement_bags(self, cement_kg: float) -> int:
        """Bag count always rounds up — you can't buy half a bag."""
        if cement_kg <= 0:
            return 0
        return math.ceil(cement_kg / self.BAG_KG)

    def steel_breakdown(self, quantities: dict, system: UnitSystem, lang: str) -> dict:
        """Split the average steel weight across bar groups for this structure type."""
        avg_steel = (quantities["steel_kg_min"] + quantities["steel_kg_max"]) / 2.0
        parts = []
        for key, detail, share in self.STEEL_SPLIT:
            weight_kg = avg_steel * share
            parts.append({
                "name": t(key, lang),
                "detail": detail,
                "share": share,
                "weight_kg": weight_kg,
                "weight": round(units.convert_value(weight_kg, "weight", system), 1),
            })
        return {"type": t(self.BREAKDOWN_TYPE, lang), "parts": parts}

    def cost_estimate(self, volume_m3: float, quantities: dict, config: dict) -> dict:
        avg_steel = (quantities["steel_kg_min"] + quantities["steel_kg_max"]) / 2.0
        concrete = volume_m3 * config["cost_concrete_per_m3"]
        steel = avg_steel * config["cost_steel_per_kg"]
        return {
            "concrete": round(concrete, 2),
            "steel": round(steel, 2),
            "total": round(concrete + steel, 2),
        }

    def make_material_item(self, key: str, description: str, quantity_si: float,
                           kind: str, system: UnitSystem, note: str = "",
                           decimals: int = 2) -> dict:
        """Build a MaterialItem dict — SI value plus display value in `system`."""
        labels = units.labels_for(system)
        si_labels = units.labels_for(UnitSystem.SI)
        return {
            "key": key,
            "description": description,
            "quantity_si": quantity_si,
            "unit_si": si_labels[kind],
            "quantity": round(units.convert_value(quantity_si, kind, system), decimals),
            "unit": labels[kind],
            "note": note,
        }

    def make_estimate(self, fields: dict, area_m2: float, volume_m3: float,
                      config: dict = None, lang: str = "pt",
                      assumptions: list = None) -> dict:
        """Build the Estimate output dict."""
        config = resolve_config(config)
        system = self.unit_system(fields)
        quantities = self.derive_materials(volume_m3, config)
        labels = units.labels_for(system)

        materials = [
            self.make_material_item(
                "cement", t("cement", lang), quantities["cement_kg"], "weight", system,
                note="~%d %s" % (quantities["cement_bags"], t("bags", lang)), decimals=1),
            self.make_material_item(
                "sand", t("sand", lang), quantities["sand_m3"], "volume", system),
            self.make_material_item(
                "gravel", t("gravel", lang), quantities["gravel_m3"], "volume", system,
                note="12/24"),
            self.make_material_item(
                "water", t("water", lang), quantities["water_l"], "liquid", system,
                note="w/c ~0.5", decimals=1),
            self.make_material_item(
                "steel_min", t("steel", lang) + " (min)", quantities["steel_kg_min"], "weight",
                system, note="A400 / A500 NR", decimals=0),
            self.make_material_item(
                "steel_max", t("steel", lang) + " (max)", quantities["steel_kg_max"], "weight",
                system, note="A400 / A500 NR", decimals=0),
        ]

        logger.debug("%s estimate: area=%.4f m2 volume=%.4f m3", self.MODE, area_m2, volume_m3)

        return {
            "mode": self.MODE,
            "structure_type": t(self.MODE, lang),
            "unit_system": system.value,
            "lang": lang,
            "area_m2": area_m2,
            "volume_m3": volume_m3,
            "display": {
                "area": round(units.convert_value(area_m2, "area", system), 2),
                "large_area": round(units.large_area(area_m2, system), 4),
                "volume": round(units.convert_value(volume_m3, "volume", system), 3),
                "units": labels,
            },
            "quantities": quantities,
            "materials": materials,
            "steel_breakdown": self.steel_breakdown(quantities, system, lang),
            "cost": self.cost_estimate(volume_m3, quantities, config),
            "config": config,
            "assumptions": assumptions or [],
        }
