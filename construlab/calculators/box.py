"""
Box calculator — beams, pillars, footings.

Volume = length × width × height. Reinforcement is longitudinal bars + stirrups.
"""

from .base import BaseCalculator


class BoxCalculator(BaseCalculator):

    MODE = "box"
    BREAKDOWN_TYPE = "beam_pillar"
    STEEL_SPLIT = (
        ("long", "4x - 8x Ø12 - Ø20", 0.7),
        ("stirrups", "Ø6 - Ø8 // 15cm", 0.3),
    )

    def calculate(self, fields: dict, config: dict = None, lang: str = "pt") -> dict:
        system = self.unit_system(fields)

        length_m = self.parse_length(fields.get("length"), system)
        width_m = self.parse_length(fields.get("width"), system)
        height_m = self.parse_length(fields.get("height"), system)

        area_m2 = length_m * width_m
        volume_m3 = area_m2 * height_m

        assumptions = [
            "Ratios are volumetric averages per m³ of concrete — adjust the mix for local practice.",
            "Box section %.2f m × %.2f m × %.2f m." % (length_m, width_m, height_m),
        ]

        return self.make_estimate(
            fields,
            area_m2=area_m2,
            volume_m3=volume_m3,
            config=config,
            lang=lang,
            assumptions=assumptions,
        )
