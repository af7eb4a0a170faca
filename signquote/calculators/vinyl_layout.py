"""
Vinyl layout planner — linear roll length needed for N rectangular pieces.

Two strategies across a roll of fixed effective width:
- pack:  pieces side by side across the roll, rows fed along it
- tile:  a piece wider than the roll is split into overlapping columns

Gutter rule: every row (and every tiled piece) carries one gutter along the
feed direction, so a single 500 mm row costs 505 mm at a 5 mm margin.

All lengths are millimetres; total_lm is the same length in metres.
"""

import logging
import math

from ..models import Orientation, VinylSplitMode

logger = logging.getLogger(__name__)


def pack_across_width(across_mm: float, along_mm: float, effective_width_mm: float,
                      pieces: int, gutter_mm: float) -> dict:
    """Pack pieces side by side across the roll; rows run along the feed."""
    per_row = max(1, math.floor(effective_width_mm / (across_mm + gutter_mm)))
    rows = math.ceil(pieces / per_row)
    total_mm = rows * (along_mm + gutter_mm)
    return {
        "strategy": "pack",
        "per_row": per_row,
        "rows": rows,
        "columns": None,
        "total_mm": total_mm,
        "total_lm": total_mm / 1000.0,
    }


def tile_columns(across_mm: float, along_mm: float, effective_width_mm: float,
                 pieces: int, overlap_mm: float, gutter_mm: float) -> dict:
    """Split each oversize piece into overlapping columns, printed one after another."""
    usable = max(1.0, effective_width_mm - overlap_mm)
    columns = math.ceil((across_mm + overlap_mm) / usable)
    total_mm = columns * pieces * (along_mm + gutter_mm)
    return {
        "strategy": "tile",
        "per_row": None,
        "rows": None,
        "columns": columns,
        "total_mm": total_mm,
        "total_lm": total_mm / 1000.0,
    }


class VinylLayoutPlanner:
    """
    Chooses how a sign is laid out on the roll and how much roll it uses.

    Auto mode tries the sign as drawn and rotated; custom mode splits the
    sign into N strips first. Either way a piece that fits across the roll
    is packed, anything wider is tiled.
    """

    def plan(self, width_mm: float, height_mm: float, quantity: int,
             effective_width_mm: float, gutter_mm: float, overlap_mm: float,
             split_mode: VinylSplitMode = VinylSplitMode.AUTO, split_count: int = 1,
             split_orientation: Orientation = Orientation.VERTICAL) -> dict:
        """
        Returns:
            {strategy, per_row, rows, columns, total_mm, total_lm,
             orientation, pieces, note}
        """
        quantity = max(1, quantity)
        if split_mode == VinylSplitMode.CUSTOM:
            layout = self.plan_custom(width_mm, height_mm, quantity, effective_width_mm,
                                      gutter_mm, overlap_mm, split_count, split_orientation)
        else:
            layout = self.plan_auto(width_mm, height_mm, quantity, effective_width_mm,
                                    gutter_mm, overlap_mm)
        logger.debug("Vinyl layout: %s", layout["note"])
        return layout

    def plan_auto(self, width_mm: float, height_mm: float, quantity: int,
                  effective_width_mm: float, gutter_mm: float, overlap_mm: float) -> dict:
        """Rotate to fit: pick whichever orientation uses less roll."""
        candidates = []
        if width_mm <= effective_width_mm:
            layout = pack_across_width(width_mm, height_mm, effective_width_mm, quantity, gutter_mm)
            layout["orientation"] = "as drawn"
            candidates.append(layout)
        if height_mm <= effective_width_mm:
            layout = pack_across_width(height_mm, width_mm, effective_width_mm, quantity, gutter_mm)
            layout["orientation"] = "rotated"
            candidates.append(layout)

        width_label = self._width_label(effective_width_mm)
        if candidates:
            pick = min(candidates, key=lambda c: c["total_mm"])  # first wins a tie
            pick["pieces"] = quantity
            pick["note"] = (
                f"Auto ({pick['orientation']}); {pick['per_row']}/row, "
                f"{pick['rows']} row(s) @ {width_label}"
            )
            return pick

        as_drawn = tile_columns(width_mm, height_mm, effective_width_mm, quantity, overlap_mm, gutter_mm)
        as_drawn["orientation"] = "as drawn"
        rotated = tile_columns(height_mm, width_mm, effective_width_mm, quantity, overlap_mm, gutter_mm)
        rotated["orientation"] = "rotated"
        pick = as_drawn if as_drawn["total_mm"] <= rotated["total_mm"] else rotated
        pick["pieces"] = quantity
        pick["note"] = f"Auto tiled ({pick['orientation']}); {pick['columns']} col @ {width_label}"
        return pick

    def plan_custom(self, width_mm: float, height_mm: float, quantity: int,
                    effective_width_mm: float, gutter_mm: float, overlap_mm: float,
                    split_count: int, orientation: Orientation) -> dict:
        """Split the sign into N strips, then pack or tile the strips."""
        n = max(1, split_count)
        if orientation == Orientation.HORIZONTAL:
            across_mm, along_mm = height_mm / n, width_mm
        else:
            across_mm, along_mm = width_mm / n, height_mm
        pieces = quantity * n

        width_label = self._width_label(effective_width_mm)
        label = f"Custom {n}x {orientation.value}"
        if across_mm <= effective_width_mm:
            layout = pack_across_width(across_mm, along_mm, effective_width_mm, pieces, gutter_mm)
            layout["note"] = f"{label}, {layout['per_row']}/row, {layout['rows']} row(s) @ {width_label}"
        else:
            layout = tile_columns(across_mm, along_mm, effective_width_mm, pieces, overlap_mm, gutter_mm)
            layout["note"] = f"{label}, tiled ({layout['columns']} col) @ {width_label}"
        layout["orientation"] = orientation.value
        layout["pieces"] = pieces
        return layout

    def _width_label(self, effective_width_mm: float) -> str:
        return f"{round(effective_width_mm)}mm"
