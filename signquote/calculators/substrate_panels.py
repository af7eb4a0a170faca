"""
Substrate panel planner — panels per stock sheet and sheets to charge.

Margins are taken off the sheet edges only; panels butt up against each
other inside the usable area. Sheets are billed in halves for small jobs:
anything up to half a sheet is charged as 0.5, more than that rounds up to
whole sheets.
"""

import logging
import math

from ..models import Orientation

logger = logging.getLogger(__name__)

HALF_SHEET = 0.5


def panel_geometry(width_mm: float, height_mm: float, splits: int,
                   orientation: Orientation) -> tuple:
    """
    Split the sign into N panels. Vertical splits cut across the width,
    horizontal splits across the height. 0 splits = one whole panel.

    Returns:
        (panel_width_mm, panel_height_mm, panel_count)
    """
    n = max(1, splits)
    if orientation == Orientation.HORIZONTAL:
        return width_mm, height_mm / n, n
    return width_mm / n, height_mm, n


def _grid(usable_w: float, usable_h: float, panel_w: float, panel_h: float) -> int:
    if panel_w <= 0 or panel_h <= 0:
        return 0
    return max(0, math.floor(usable_w / panel_w)) * max(0, math.floor(usable_h / panel_h))


def panels_per_sheet(usable_w: float, usable_h: float, panel_w: float, panel_h: float) -> int:
    """Grid-pack panels on the usable sheet; the panel may be turned 90 degrees."""
    return max(
        _grid(usable_w, usable_h, panel_w, panel_h),
        _grid(usable_w, usable_h, panel_h, panel_w),
    )


def charged_sheets(needed_sheets: float) -> float:
    """Half-sheet minimum, then whole sheets."""
    if math.isinf(needed_sheets):
        return math.inf
    if needed_sheets <= HALF_SHEET:
        return HALF_SHEET
    return float(math.ceil(needed_sheets))


class SubstratePanelPlanner:
    """Works out how many stock sheets a substrate job consumes and costs."""

    def plan(self, width_mm: float, height_mm: float, quantity: int, splits: int,
             orientation: Orientation, substrate, margin_mm: float) -> dict:
        """
        Args:
            substrate: Substrate record (size_w, size_h, price_per_sheet)

        Returns:
            {panel_width_mm, panel_height_mm, panel_count, total_panels,
             usable_width_mm, usable_height_mm, panels_per_sheet,
             needed_sheets, charged_sheets, sheet_cost, usage_pct}

            needed_sheets and charged_sheets are inf when the panel cannot be
            cut from this sheet at all (panels_per_sheet == 0).
        """
        panel_w, panel_h, n = panel_geometry(width_mm, height_mm, splits, orientation)
        usable_w = max(0.0, substrate.size_w - 2 * margin_mm)
        usable_h = max(0.0, substrate.size_h - 2 * margin_mm)

        per_sheet = panels_per_sheet(usable_w, usable_h, panel_w, panel_h)
        total_panels = max(1, quantity) * n
        needed = total_panels / per_sheet if per_sheet > 0 else math.inf
        charged = charged_sheets(needed)

        usable_area = usable_w * usable_h
        usage_pct = min(100.0, panel_w * panel_h / usable_area * 100.0) if usable_area > 0 else 0.0

        logger.debug(
            "Sheet plan: panel %.1fx%.1fmm, %d/sheet, needed %.4f, charged %s",
            panel_w, panel_h, per_sheet, needed, charged,
        )
        return {
            "panel_width_mm": panel_w,
            "panel_height_mm": panel_h,
            "panel_count": n,
            "total_panels": total_panels,
            "usable_width_mm": usable_w,
            "usable_height_mm": usable_h,
            "panels_per_sheet": per_sheet,
            "needed_sheets": needed,
            "charged_sheets": charged,
            "sheet_cost": charged * substrate.price_per_sheet,
            "usage_pct": usage_pct,
        }
