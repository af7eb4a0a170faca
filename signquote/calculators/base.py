"""
Abstract base class for all product-mode calculators.

Input: SignRequest + the media/substrate it selected + canonical Configuration
Output: ModeCost dict (materials, ink, usage, cost items, notes)

Mode calculators only cover what is specific to the product. Cutting,
uplifts, profit and delivery are added afterwards by the pricing engine.
"""

import logging
from abc import ABC, abstractmethod

from ..config import settings
from ..errors import GeometryError, SelectionError
from .effective_width import get_effective_widths
from .substrate_panels import HALF_SHEET, SubstratePanelPlanner
from .vinyl_layout import VinylLayoutPlanner

logger = logging.getLogger(__name__)


class BaseCalculator(ABC):
    """All product-mode calculators inherit from this."""

    def __init__(self):
        self.layout_planner = VinylLayoutPlanner()
        self.panel_planner = SubstratePanelPlanner()

    @abstractmethod
    def calculate(self, request, media, substrate, config) -> dict:
        """
        Takes the request and the catalog entries it selected.
        Returns a ModeCost dict built with make_mode_cost().
        """
        pass

    # --- Helper methods for all calculators ---

    def mm2_to_sqm(self, mm2: float) -> float:
        return mm2 / 1_000_000.0

    def sign_area_sqm(self, request) -> float:
        """Total printed face area for the whole order."""
        return self.mm2_to_sqm(request.width_mm * request.height_mm * request.quantity)

    def perimeter_m(self, request) -> float:
        """Cut path of one sign, in metres."""
        return 2.0 * (request.width_mm + request.height_mm) / 1000.0

    def require_media(self, media, printable: bool = False):
        if media is None:
            raise SelectionError("Select a printable media" if printable else "Select a vinyl media")
        return media

    def require_substrate(self, substrate):
        if substrate is None:
            raise SelectionError("Select a substrate")
        return substrate

    def require_width(self, effective_width_mm: float, media, kind: str):
        if effective_width_mm <= 0:
            raise GeometryError(
                f"{media.name} has no usable {kind} width ({effective_width_mm:g}mm)"
            )

    def make_vinyl_item(self, media, lm: float) -> dict:
        """Build a VinylCostItem dict for the breakdown."""
        return {
            "media": media.name,
            "lm": round(lm, 3),
            "price_per_lm": round(media.price_per_lm, 2),
            "cost": round(lm * media.price_per_lm, 2),
        }

    def make_substrate_item(self, substrate, plan: dict) -> dict:
        """Build a SubstrateCostItem dict for the breakdown."""
        return {
            "material": substrate.name,
            "sheet": f"{substrate.size_w:g}×{substrate.size_h:g}",
            "needed_sheets": round(plan["needed_sheets"], 2),
            "charged_sheets": plan["charged_sheets"],
            "price_per_sheet": round(substrate.price_per_sheet, 2),
            "cost": round(plan["sheet_cost"], 2),
        }

    def make_mode_cost(self, materials: float = 0.0, ink: float = 0.0,
                       vinyl_lm: float = None, vinyl_lm_with_waste: float = None,
                       effective_width_mm: float = None, vinyl_items: list = None,
                       substrate_items: list = None, sheet_plan: dict = None,
                       ship_width_mm: float = 0.0, ship_height_mm: float = 0.0,
                       notes: list = None) -> dict:
        """Build the ModeCost dict every calculator returns. Amounts are unrounded."""
        return {
            "materials": materials,
            "ink": ink,
            "vinyl_lm": vinyl_lm,
            "vinyl_lm_with_waste": vinyl_lm_with_waste,
            "effective_width_mm": effective_width_mm,
            "vinyl_items": vinyl_items or [],
            "substrate_items": substrate_items or [],
            "sheet_plan": sheet_plan,
            "ship_width_mm": ship_width_mm,
            "ship_height_mm": ship_height_mm,
            "notes": notes or [],
        }

    # --- Shared steps ---

    def printed_vinyl(self, request, media, config, notes: list) -> dict:
        """
        Roll usage for a printed job: layout planner length, doubled for
        double-sided work, plus the per-job waste allowance.

        Returns:
            {lm, lm_with_waste, effective_width_mm, cost, item}
        """
        widths = get_effective_widths(media, config)
        effective_width = widths["effective_print_width_mm"]
        self.require_width(effective_width, media, "print")

        layout = self.layout_planner.plan(
            request.width_mm, request.height_mm, request.quantity,
            effective_width, config.vinyl_margin_mm, config.tile_overlap_mm,
            split_mode=request.vinyl_split_mode,
            split_count=request.vinyl_split_count,
            split_orientation=request.vinyl_split_orientation,
        )
        lm = layout["total_lm"]
        notes.append(layout["note"])
        if request.double_sided:
            lm *= 2
            notes.append("Double-sided: roll length doubled")

        lm_with_waste = lm + config.vinyl_waste_lm_per_job
        return {
            "lm": lm,
            "lm_with_waste": lm_with_waste,
            "effective_width_mm": effective_width,
            "cost": lm_with_waste * media.price_per_lm,
            "item": self.make_vinyl_item(media, lm_with_waste),
        }

    def substrate_sheets(self, request, substrate, config, notes: list) -> dict:
        """Sheet plan for the substrate; a panel that never fits is a geometry error."""
        plan = self.panel_planner.plan(
            request.width_mm, request.height_mm, request.quantity,
            request.panel_splits, request.panel_orientation,
            substrate, config.substrate_margin_mm,
        )
        if plan["panels_per_sheet"] == 0:
            raise GeometryError(
                "Substrate panel %gx%gmm does not fit the usable area of %s (%gx%gmm)" % (
                    plan["panel_width_mm"], plan["panel_height_mm"], substrate.name,
                    plan["usable_width_mm"], plan["usable_height_mm"]))

        if request.panel_splits > 0:
            notes.append(
                "Substrate split: %d x %s -> panel %dx%dmm; %d per sheet" % (
                    plan["panel_count"], request.panel_orientation.value,
                    round(plan["panel_width_mm"]), round(plan["panel_height_mm"]),
                    plan["panels_per_sheet"]))
        if plan["charged_sheets"] == HALF_SHEET:
            notes.append("Half-sheet minimum charge applied")
        notes.append("%s: %g sheet(s) charged (%.2f needed)" % (
            substrate.name, plan["charged_sheets"], plan["needed_sheets"]))
        return plan

    def tape_and_backing(self, request, lm: float, config, notes: list,
                         allow_backing: bool = True) -> float:
        """Application tape and white backing, charged on roll length and face area."""
        extra = 0.0
        area = self.sign_area_sqm(request)
        if request.application_tape:
            tape = lm * config.app_tape_per_lm + area * config.app_tape_per_sqm
            if tape:
                extra += tape
                notes.append(f"Application tape: {lm:.2f} lm / {area:.2f} m² = {settings.CURRENCY_SYMBOL}{tape:.2f}")
        if allow_backing and request.white_backing:
            backing = lm * config.white_backing_per_lm + area * config.white_backing_per_sqm
            if backing:
                extra += backing
                notes.append(f"White backing: {lm:.2f} lm / {area:.2f} m² = {settings.CURRENCY_SYMBOL}{backing:.2f}")
        return extra

    def ink_cost(self, request, config) -> float:
        return self.sign_area_sqm(request) * config.ink_per_sqm
