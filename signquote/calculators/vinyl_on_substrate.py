"""
Printed vinyl mounted to a substrate.

Vinyl is laid out on the roll as for any printed job; the substrate is cut
into panels (optionally split) and billed by the sheet. Delivery is sized on
the panel, since that is what goes in the box.
"""

from .base import BaseCalculator


class PrintedVinylOnSubstrateCalculator(BaseCalculator):

    def calculate(self, request, media, substrate, config) -> dict:
        media = self.require_media(media, printable=True)
        substrate = self.require_substrate(substrate)
        notes = []

        vinyl = self.printed_vinyl(request, media, config, notes)
        plan = self.substrate_sheets(request, substrate, config, notes)

        materials = vinyl["cost"] + plan["sheet_cost"]
        materials += self.tape_and_backing(request, vinyl["lm"], config, notes)

        return self.make_mode_cost(
            materials=materials,
            ink=self.ink_cost(request, config),
            vinyl_lm=vinyl["lm"],
            vinyl_lm_with_waste=vinyl["lm_with_waste"],
            effective_width_mm=vinyl["effective_width_mm"],
            vinyl_items=[vinyl["item"]],
            substrate_items=[self.make_substrate_item(substrate, plan)],
            sheet_plan=plan,
            ship_width_mm=plan["panel_width_mm"],
            ship_height_mm=plan["panel_height_mm"],
            notes=notes,
        )
