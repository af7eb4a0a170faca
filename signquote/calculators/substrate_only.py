"""
Substrate only — blank or pre-finished rigid panels, billed by the sheet.
"""

from .base import BaseCalculator


class SubstrateOnlyCalculator(BaseCalculator):

    def calculate(self, request, media, substrate, config) -> dict:
        substrate = self.require_substrate(substrate)
        notes = []

        plan = self.substrate_sheets(request, substrate, config, notes)

        return self.make_mode_cost(
            materials=plan["sheet_cost"],
            substrate_items=[self.make_substrate_item(substrate, plan)],
            sheet_plan=plan,
            ship_width_mm=plan["panel_width_mm"],
            ship_height_mm=plan["panel_height_mm"],
            notes=notes,
        )
