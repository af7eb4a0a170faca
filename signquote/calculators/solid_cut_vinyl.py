"""
Solid colour cut vinyl calculator.

Plotter-cut lettering/shapes from coloured roll stock. Nothing is printed,
so there is no ink and no per-job waste allowance. Pieces are packed across
the cut width in the orientation drawn; there is no rotation search.
"""

from .base import BaseCalculator
from .effective_width import get_effective_widths
from .vinyl_layout import pack_across_width


class SolidColourCutVinylCalculator(BaseCalculator):

    def calculate(self, request, media, substrate, config) -> dict:
        media = self.require_media(media)
        notes = []

        cut_width = get_effective_widths(media, config)["effective_cut_width_mm"]
        self.require_width(cut_width, media, "cut")

        layout = pack_across_width(
            request.width_mm, request.height_mm, cut_width,
            request.quantity, config.vinyl_margin_mm,
        )
        lm = layout["total_lm"]
        notes.append("%d/row across %gmm cut width, %d row(s)" % (
            layout["per_row"], cut_width, layout["rows"]))
        if request.width_mm > cut_width:
            notes.append("Sign width %gmm exceeds the %gmm cut width; packed one per row" % (
                request.width_mm, cut_width))

        materials = lm * media.price_per_lm
        materials += self.tape_and_backing(request, lm, config, notes, allow_backing=False)

        return self.make_mode_cost(
            materials=materials,
            vinyl_lm=lm,
            vinyl_lm_with_waste=lm,
            effective_width_mm=cut_width,
            vinyl_items=[self.make_vinyl_item(media, lm)],
            ship_width_mm=request.width_mm,
            ship_height_mm=request.height_mm,
            notes=notes,
        )
