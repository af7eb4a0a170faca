"""
Pricing Engine — synthesizes the full PriceBreakdown for one sign request.

Pure math, no I/O, no state kept between calls. Quantity × rate, uplifts on
the accumulated base, profit on materials and ink, delivery on top.

Input: SignRequest + catalog snapshot (media, substrates) + cost settings
Output: PriceBreakdown (currency rounded to 2 dp only here, at emission)

Accumulation order:
1. validate the selection for the product mode
2. mode calculator: materials, ink, roll/sheet usage
3. cutting: per-sign fee, or the plotter-cut charge when a cut option is chosen
4. per-unit surcharges (complexity, hem/eyelets) into cutting
5. cutting-style and finishing uplifts, both on materials + ink + cutting + setup
6. pre-delivery = (materials + ink) × profit multiplier + setup + cutting + finishing uplift
7. delivery band, total, VAT
"""

import logging

from .calculators.registry import get_calculator
from .config import settings
from .delivery import DeliveryBandResolver, shipped_size_cm
from .errors import SelectionError
from .models import MODE_PROFILES, DeliveryMode, PlotterCut
from .schemas import PriceBreakdown, SignRequest, Substrate, VinylMedia
from .settings_normalizer import normalize_settings

logger = logging.getLogger(__name__)


def _money(amount: float) -> float:
    return round(amount, 2)


class PricingEngine:
    """
    Cost synthesizer.
    Dispatches to the calculator for the request's product mode and adds
    everything that applies across modes.
    """

    def __init__(self):
        self.delivery_resolver = DeliveryBandResolver()

    def build_price_breakdown(self, request, media, substrates, config) -> PriceBreakdown:
        """
        Price one sign request.

        Args:
            request: SignRequest (or a mapping that validates as one)
            media: ordered VinylMedia records, unique by id
            substrates: ordered Substrate records, unique by id
            config: canonical Configuration or raw cost settings

        Returns:
            PriceBreakdown

        Raises:
            SelectionError: a required media/substrate is missing or unknown
            GeometryError: the piece/panel cannot be produced from the stock
        """
        if not isinstance(request, SignRequest):
            request = SignRequest.model_validate(request)
        config = normalize_settings(config)
        profile = MODE_PROFILES[request.mode]
        symbol = settings.CURRENCY_SYMBOL

        # --- 1. Selection ---
        media_item = None
        substrate_item = None
        if profile["needs_media"]:
            media_item = self._find(media, request.vinyl_id, VinylMedia, "vinyl media")
        if profile["needs_substrate"]:
            substrate_item = self._find(substrates, request.substrate_id, Substrate, "substrate")

        # --- 2. Mode-specific cost ---
        calculator = get_calculator(request.mode)
        mode_cost = calculator.calculate(request, media_item, substrate_item, config)
        notes = list(mode_cost["notes"])

        materials = mode_cost["materials"]
        ink = mode_cost["ink"]
        setup = config.setup_fee

        # --- 3-4. Cutting ---
        cutting = self._cutting_charge(request, config, calculator.perimeter_m(request), notes)
        cutting += self._unit_surcharges(request, profile, config, notes)

        # --- 5. Uplifts on the accumulated base ---
        base = materials + ink + cutting + setup
        style_rate = config.cutting_style_uplifts.get(request.cutting_style, 0.0)
        if style_rate:
            style_uplift = style_rate * base
            cutting += style_uplift
            notes.append(f"Cutting style {request.cutting_style.value}: "
                         f"{style_rate:.0%} uplift = {symbol}{style_uplift:.2f}")

        finishing_uplift = 0.0
        finishing_rate = config.finishing_uplifts.get(request.finishing, 0.0)
        if profile["finishing_uplift"] and finishing_rate:
            finishing_uplift = finishing_rate * base
            notes.append(f"Finishing {request.finishing.value}: "
                         f"{finishing_rate:.0%} uplift = {symbol}{finishing_uplift:.2f}")

        # --- 6. Profit ---
        pre_delivery = (materials + ink) * config.profit_multiplier + (setup + cutting + finishing_uplift)

        # --- 7. Delivery + VAT ---
        size_cm = shipped_size_cm(
            mode_cost["ship_width_mm"], mode_cost["ship_height_mm"],
            config.delivery.measure, settings.DELIVERY_THICKNESS_MM,
        )
        delivery = self.delivery_resolver.resolve(config.delivery, size_cm, request.delivery_mode)
        if delivery["charge"] == 0 and request.delivery_mode == DeliveryMode.ON_A_ROLL and config.delivery.bands:
            notes.append("Shipped on a roll: band surcharge waived")
        total = pre_delivery + delivery["price"]
        vat = total * config.vat_rate_pct / 100.0

        logger.info(
            "Priced %s x%d: pre-delivery %.2f, delivery %.2f (%s), total %.2f",
            request.mode.value, request.quantity, pre_delivery, delivery["price"],
            delivery["band"], total,
        )

        plan = mode_cost["sheet_plan"]
        return PriceBreakdown(
            mode=request.mode,
            quantity=request.quantity,
            materials=_money(materials),
            ink=_money(ink),
            setup=_money(setup),
            cutting=_money(cutting),
            finishing_uplift=_money(finishing_uplift),
            pre_delivery=_money(pre_delivery),
            delivery=_money(delivery["price"]),
            total=_money(total),
            vat=_money(vat),
            total_inc_vat=_money(total + vat),
            vinyl_lm=self._round_opt(mode_cost["vinyl_lm"], 3),
            vinyl_lm_with_waste=self._round_opt(mode_cost["vinyl_lm_with_waste"], 3),
            effective_width_mm=mode_cost["effective_width_mm"],
            substrate_sheets_needed=round(plan["needed_sheets"], 3) if plan else None,
            substrate_sheets_charged=plan["charged_sheets"] if plan else None,
            panel_width_mm=round(plan["panel_width_mm"], 1) if plan else None,
            panel_height_mm=round(plan["panel_height_mm"], 1) if plan else None,
            panels_per_sheet=plan["panels_per_sheet"] if plan else None,
            sheet_usage_pct=round(plan["usage_pct"], 1) if plan else None,
            sheet_waste_pct=round(100.0 - plan["usage_pct"], 1) if plan else None,
            delivery_band=delivery["band"],
            costs={
                "vinyl": mode_cost["vinyl_items"],
                "substrate": mode_cost["substrate_items"],
            },
            notes=notes,
        )

    def _find(self, items, item_id, model, label):
        """Look up the selected catalog entry by id."""
        if not item_id:
            raise SelectionError(f"Select a {label}")
        for item in items or []:
            record = item if isinstance(item, model) else model.model_validate(item)
            if record.id == item_id:
                return record
        raise SelectionError(f"Unknown {label}: {item_id}")

    def _cutting_charge(self, request, config, perimeter_m: float, notes: list) -> float:
        """Plotter-cut option charge, or the default per-sign cutting fee."""
        qty = request.quantity
        symbol = settings.CURRENCY_SYMBOL
        cut = request.plotter_cut

        if cut != PlotterCut.NONE:
            setup_add = config.plotter_cut_setup.get(cut, 0.0)
            per_piece = config.plotter_cut_per_piece.get(cut, 0.0)
            piece_add = per_piece * qty
            perimeter_add = config.plotter_perimeter_per_m * perimeter_m * qty

            parts = []
            if setup_add:
                parts.append(f"setup {symbol}{setup_add:.2f}")
            if piece_add:
                parts.append(f"{qty} x {symbol}{per_piece:.2f} = {symbol}{piece_add:.2f}")
            if perimeter_add:
                parts.append(f"perimeter {perimeter_m * qty:.2f} m = {symbol}{perimeter_add:.2f}")
            notes.append(f"Cut option: {cut.value} - " + (" + ".join(parts) or f"{symbol}0.00"))
            return setup_add + piece_add + perimeter_add

        default = config.cut_per_sign * qty
        if default:
            notes.append(f"Cut option: None - {qty} x {symbol}{config.cut_per_sign:.2f} "
                         f"= {symbol}{default:.2f}")
        return default

    def _unit_surcharges(self, request, profile: dict, config, notes: list) -> float:
        """Per-unit complexity and hem/eyelet surcharges."""
        qty = request.quantity
        symbol = settings.CURRENCY_SYMBOL
        total = 0.0

        if profile["complexity_surcharge"]:
            rate = config.complexity_per_unit.get(request.complexity, 0.0)
            if rate:
                total += rate * qty
                notes.append(f"Complexity {request.complexity.value}: {qty} x {symbol}{rate:.2f} "
                             f"= {symbol}{rate * qty:.2f}")

        if profile["hem_eyelets"] and request.hem_eyelets:
            rate = config.hem_eyelets_per_piece
            total += rate * qty
            notes.append(f"Hem/Eyelets: {qty} x {symbol}{rate:.2f} = {symbol}{rate * qty:.2f}")

        return total

    def _round_opt(self, value, digits: int):
        return round(value, digits) if value is not None else None
