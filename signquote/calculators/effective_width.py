"""
Effective roll width — the binding print and cut widths for one media item.

Each width is the smallest of three caps: the machine-wide cap from the
cost settings (0 means no cap), the roll itself, and the media's own
optional cap.
"""

import math


def _cap(value) -> float:
    """Treat a missing or non-positive cap as unlimited."""
    if value is None or value <= 0:
        return math.inf
    return value


def get_effective_widths(media, config) -> dict:
    """
    Returns:
        {"effective_print_width_mm": float, "effective_cut_width_mm": float}
    """
    print_caps = [
        _cap(config.master_max_print_width_mm),
        media.roll_printable_width_mm,
        _cap(media.max_print_width_mm),
    ]
    cut_caps = [
        _cap(config.master_max_cut_width_mm),
        media.roll_width_mm,
        _cap(media.max_cut_width_mm),
    ]
    return {
        "effective_print_width_mm": min(print_caps),
        "effective_cut_width_mm": min(cut_caps),
    }
