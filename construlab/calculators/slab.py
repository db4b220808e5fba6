"""
Slab calculator.

Footprint area comes from the traced polygon (or an explicit area in m²).
Volume = area × thickness. Reinforcement is mesh + distribution bars.
"""

from .. import geometry
from .base import BaseCalculator


class SlabCalculator(BaseCalculator):

    MODE = "slab"
    BREAKDOWN_TYPE = "slab_mesh"
    STEEL_SPLIT = (
        ("mesh", "Ø10 - Ø12 // 15-20cm", 0.6),
        ("dist", "Ø8 // 20-25cm", 0.4),
    )

    def calculate(self, fields: dict, config: dict = None, lang: str = "pt") -> dict:
        assumptions = [
            "Ratios are volumetric averages per m³ of concrete — adjust the mix for local practice.",
        ]
        system = self.unit_system(fields)

        points = fields.get("points")
        if points:
            area_m2 = self._polygon_area(points, fields, assumptions)
        else:
            area_m2 = max(self.parse_number(fields.get("area_m2")), 0.0)

        thickness = fields.get("thickness")
        if thickness is None:
            thickness = fields.get("height")
        thickness_m = self.parse_length(thickness, system)
        volume_m3 = area_m2 * thickness_m

        if thickness_m == 0:
            assumptions.append("No slab thickness given — volume is zero.")

        return self.make_estimate(
            fields,
            area_m2=area_m2,
            volume_m3=volume_m3,
            config=config,
            lang=lang,
            assumptions=assumptions,
        )

    def _polygon_area(self, points, fields, assumptions):
        scale = self.parse_number(fields.get("scale"), default=geometry.DEFAULT_SCALE_PX_PER_M)
        is_closed = bool(fields.get("is_closed", True))

        if not is_closed or len(points) < 3:
            assumptions.append("Footprint is not a closed polygon (min. 3 points) — area is zero.")
            return 0.0

        area = geometry.area_m2(points, scale)
        assumptions.append(
            "Footprint traced with %d points at %.2f px/m." % (len(points), scale))
        return area
