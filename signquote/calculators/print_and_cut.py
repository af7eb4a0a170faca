"""
Print & cut vinyl calculator.

Printed, contour-cut vinyl. Roll length comes from the layout planner with
the per-job waste allowance added; application tape and white backing are
charged on the roll length actually produced.
"""

from .base import BaseCalculator


class PrintAndCutVinylCalculator(BaseCalculator):

    def calculate(self, request, media, substrate, config) -> dict:
        media = self.require_media(media, printable=True)
        notes = []

        vinyl = self.printed_vinyl(request, media, config, notes)
        materials = vinyl["cost"]
        materials += self.tape_and_backing(request, vinyl["lm"], config, notes)

        return self.make_mode_cost(
            materials=materials,
            ink=self.ink_cost(request, config),
            vinyl_lm=vinyl["lm"],
            vinyl_lm_with_waste=vinyl["lm_with_waste"],
            effective_width_mm=vinyl["effective_width_mm"],
            vinyl_items=[vinyl["item"]],
            ship_width_mm=request.width_mm,
            ship_height_mm=request.height_mm,
            notes=notes,
        )
