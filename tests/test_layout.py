"""
Roll and sheet geometry tests.

Tests:
1-4.   Effective-width resolver
5-9.   Vinyl layout: packing and tiling primitives
10-15. Vinyl layout planner (auto + custom)
16-22. Substrate panel planner
"""

import math

import pytest

from signquote.calculators.effective_width import get_effective_widths
from signquote.calculators.substrate_panels import (
    SubstratePanelPlanner, charged_sheets, panel_geometry, panels_per_sheet,
)
from signquote.calculators.vinyl_layout import (
    VinylLayoutPlanner, pack_across_width, tile_columns,
)
from signquote.models import Orientation, VinylSplitMode
from signquote.schemas import Configuration, Substrate, VinylMedia


# --- Test fixtures ---

def _sample_media(**overrides):
    data = {
        "id": "mono-1370",
        "name": "Monomeric 1370",
        "roll_width_mm": 1370,
        "roll_printable_width_mm": 1340,
        "price_per_lm": 3.5,
    }
    data.update(overrides)
    return VinylMedia(**data)


def _sample_substrate(**overrides):
    data = {
        "id": "foamex-2440x1220",
        "name": "Foamex 3mm",
        "size_w": 2440,
        "size_h": 1220,
        "price_per_sheet": 18,
    }
    data.update(overrides)
    return Substrate(**data)


# ============================================================
# 1-4. Effective-width resolver
# ============================================================

def test_effective_width_uses_roll_widths_without_caps():
    widths = get_effective_widths(_sample_media(), Configuration())
    assert widths["effective_print_width_mm"] == 1340
    assert widths["effective_cut_width_mm"] == 1370


def test_effective_width_per_media_cap():
    media = _sample_media(max_print_width_mm=1300, max_cut_width_mm=1350)
    widths = get_effective_widths(media, Configuration())
    assert widths["effective_print_width_mm"] == 1300
    assert widths["effective_cut_width_mm"] == 1350


def test_effective_width_machine_cap():
    config = Configuration(master_max_print_width_mm=1200, master_max_cut_width_mm=1000)
    widths = get_effective_widths(_sample_media(max_print_width_mm=1300), config)
    assert widths["effective_print_width_mm"] == 1200
    assert widths["effective_cut_width_mm"] == 1000


def _widths_with(cap_name, value):
    if cap_name.startswith("master_"):
        return get_effective_widths(_sample_media(), Configuration(**{cap_name: value}))
    media = {cap_name: value}
    if cap_name == "roll_width_mm":
        # printable width may not exceed the roll
        media["roll_printable_width_mm"] = min(1340, value)
    return get_effective_widths(_sample_media(**media), Configuration())


@pytest.mark.parametrize("cap_name, tightening", [
    ("master_max_print_width_mm", (0, 1600, 1340, 1200, 900, 300)),
    ("master_max_cut_width_mm", (0, 1600, 1370, 1200, 900, 300)),
    ("max_print_width_mm", (None, 1600, 1340, 1200, 900, 300)),
    ("max_cut_width_mm", (None, 1600, 1370, 1200, 900, 300)),
    ("roll_printable_width_mm", (1370, 1340, 1200, 900, 300)),
    ("roll_width_mm", (2000, 1600, 1370, 1200, 900, 300)),
])
def test_effective_width_never_increases_as_caps_tighten(cap_name, tightening):
    previous_print = previous_cut = math.inf
    for value in tightening:
        widths = _widths_with(cap_name, value)
        assert widths["effective_print_width_mm"] <= previous_print
        assert widths["effective_cut_width_mm"] <= previous_cut
        previous_print = widths["effective_print_width_mm"]
        previous_cut = widths["effective_cut_width_mm"]
    assert min(previous_print, previous_cut) == 300


# ============================================================
# 5-9. Packing and tiling primitives
# ============================================================

def test_single_row_carries_one_gutter():
    layout = pack_across_width(1000, 500, 610, 1, 5)
    assert layout["per_row"] == 1
    assert layout["rows"] == 1
    assert layout["total_mm"] == 505
    assert layout["total_lm"] == pytest.approx(0.505)


def test_pack_several_per_row():
    layout = pack_across_width(200, 300, 1340, 10, 5)
    assert layout["per_row"] == 6
    assert layout["rows"] == 2
    assert layout["total_mm"] == 610


def test_pack_never_drops_below_one_per_row():
    layout = pack_across_width(2000, 100, 1340, 3, 5)
    assert layout["per_row"] == 1
    assert layout["rows"] == 3


def test_tile_columns_with_overlap():
    layout = tile_columns(2000, 1000, 1340, 1, 10, 5)
    assert layout["strategy"] == "tile"
    assert layout["columns"] == 2
    assert layout["total_mm"] == 2010


def test_tile_columns_scale_with_pieces():
    layout = tile_columns(2000, 1000, 1340, 3, 10, 5)
    assert layout["total_mm"] == 3 * 2010


# ============================================================
# 10-15. Layout planner
# ============================================================

def test_auto_keeps_orientation_when_shorter():
    layout = VinylLayoutPlanner().plan(1000, 500, 1, 1340, 5, 10)
    assert layout["orientation"] == "as drawn"
    assert layout["total_mm"] == 505
    assert layout["note"] == "Auto (as drawn); 1/row, 1 row(s) @ 1340mm"


def test_auto_rotates_when_shorter():
    layout = VinylLayoutPlanner().plan(1000, 300, 4, 1340, 5, 10)
    assert layout["orientation"] == "rotated"
    assert layout["per_row"] == 4
    assert layout["total_mm"] == 1005


def test_auto_tie_keeps_as_drawn():
    layout = VinylLayoutPlanner().plan(500, 500, 2, 1340, 5, 10)
    assert layout["orientation"] == "as drawn"


def test_auto_tiles_when_neither_orientation_fits():
    layout = VinylLayoutPlanner().plan(2000, 1500, 1, 1340, 5, 10)
    assert layout["strategy"] == "tile"
    assert layout["orientation"] == "as drawn"
    assert layout["columns"] == 2
    assert layout["total_mm"] == 3010
    assert layout["note"].startswith("Auto tiled (as drawn); 2 col")


def test_custom_split_horizontal_and_vertical():
    planner = VinylLayoutPlanner()
    vertical = planner.plan(2000, 1000, 1, 1340, 5, 10, split_mode=VinylSplitMode.CUSTOM,
                            split_count=2, split_orientation=Orientation.VERTICAL)
    assert vertical["pieces"] == 2
    assert vertical["total_mm"] == 2010

    horizontal = planner.plan(2000, 1000, 1, 1340, 5, 10, split_mode=VinylSplitMode.CUSTOM,
                              split_count=2, split_orientation=Orientation.HORIZONTAL)
    assert horizontal["per_row"] == 2
    assert horizontal["total_mm"] == 2005


def test_custom_split_still_too_wide_tiles():
    layout = VinylLayoutPlanner().plan(3000, 1000, 1, 1340, 5, 10, split_mode=VinylSplitMode.CUSTOM,
                                       split_count=1, split_orientation=Orientation.VERTICAL)
    assert layout["strategy"] == "tile"
    assert layout["columns"] == 3
    assert layout["total_mm"] == 3015


# ============================================================
# 16-22. Substrate panel planner
# ============================================================

def test_panel_geometry_splits():
    assert panel_geometry(1000, 600, 0, Orientation.VERTICAL) == (1000, 600, 1)
    assert panel_geometry(1000, 600, 2, Orientation.VERTICAL) == (500, 600, 2)
    assert panel_geometry(1000, 600, 3, Orientation.HORIZONTAL) == (1000, 200, 3)


def test_panels_per_sheet_grid():
    assert panels_per_sheet(2430, 1210, 300, 300) == 32
    assert panels_per_sheet(2430, 1210, 3000, 1500) == 0


def test_panels_per_sheet_allows_rotation():
    assert panels_per_sheet(1000, 2000, 1500, 800) == 1


@pytest.mark.parametrize("needed,charged", [
    (0.1, 0.5),
    (0.5, 0.5),
    (0.51, 1.0),
    (1.0, 1.0),
    (1.2, 2.0),
])
def test_sheet_rounding_boundary(needed, charged):
    assert charged_sheets(needed) == charged


def test_half_sheet_minimum_for_small_panel():
    plan = SubstratePanelPlanner().plan(300, 300, 1, 0, Orientation.VERTICAL, _sample_substrate(), 5)
    assert plan["usable_width_mm"] == 2430
    assert plan["usable_height_mm"] == 1210
    assert plan["panels_per_sheet"] == 32
    assert plan["needed_sheets"] == pytest.approx(1 / 32)
    assert plan["charged_sheets"] == 0.5
    assert plan["sheet_cost"] == pytest.approx(9.0)
    assert plan["usage_pct"] == pytest.approx(90000 / (2430 * 1210) * 100)


def test_split_panels_multiply_with_quantity():
    plan = SubstratePanelPlanner().plan(2400, 1200, 2, 2, Orientation.VERTICAL, _sample_substrate(), 5)
    assert plan["panel_width_mm"] == 1200
    assert plan["total_panels"] == 4
    assert plan["panels_per_sheet"] == 2
    assert plan["charged_sheets"] == 2.0


def test_panel_too_large_for_sheet():
    plan = SubstratePanelPlanner().plan(3000, 1500, 1, 0, Orientation.VERTICAL, _sample_substrate(), 5)
    assert plan["panels_per_sheet"] == 0
    assert math.isinf(plan["needed_sheets"])
    assert math.isinf(plan["charged_sheets"])
