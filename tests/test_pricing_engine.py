"""
Pricing engine tests — full PriceBreakdown synthesis.

Tests:
1-3.   Scenario: solid colour cut vinyl (0.505 lm row)
4-5.   Scenario: printed vinyl on substrate, half-sheet charge
6-10.  Selection and geometry errors
11-14. Cutting: default fee, plotter cut, complexity, hem/eyelets
15-17. Uplifts: finishing, cutting style
18-22. Printed vinyl: waste, double-sided, ink, tape and backing
22-24. Delivery: panel sizing, on a roll, VAT
25-26. Determinism, raw request/settings input

No I/O — the engine is pure math over a catalog snapshot.
"""

import pytest

from signquote.errors import GeometryError, QuoteValidationError, SelectionError
from signquote.models import PlotterCut, ProductMode
from signquote.pricing_engine import PricingEngine
from signquote.schemas import SignRequest, Substrate, VinylMedia
from signquote.settings_normalizer import normalize_settings


# --- Test fixtures ---

def _sample_settings(**overrides):
    """Round-number shop rates; profit x2, base delivery 5."""
    raw = {
        "setupFee": 5,
        "cutPerSign": 0.25,
        "inkElecPerSqm": 4,
        "profitMultiplier": 2,
        "vinylMarginMm": 5,
        "substrateMarginMm": 5,
        "vinylWasteLmPerJob": 1,
        "deliveryBase": 5,
        "deliveryBands": [
            {"maxSumCm": 100, "surcharge": 0},
            {"maxSumCm": 200, "surcharge": 3},
            {"maxSumCm": 300, "surcharge": 5},
        ],
        "vatRatePct": 20,
    }
    raw.update(overrides)
    return normalize_settings(raw)


def _sample_media():
    return [
        VinylMedia(id="mono-1370", name="Monomeric Print 1370", roll_width_mm=1370,
                   roll_printable_width_mm=1340, price_per_lm=3.5, max_print_width_mm=1340),
        VinylMedia(id="black-610", name="Black Matt 610", roll_width_mm=610,
                   roll_printable_width_mm=610, price_per_lm=3.2, max_cut_width_mm=610),
        VinylMedia(id="broken", name="Unprintable", roll_width_mm=610,
                   roll_printable_width_mm=0, price_per_lm=3.0),
    ]


def _sample_substrates():
    return [
        Substrate(id="foamex-2440", name="Foamex 3mm", size_w=2440, size_h=1220, price_per_sheet=18),
    ]


def _request(**fields):
    data = {"mode": ProductMode.SOLID_COLOUR_CUT_VINYL, "width_mm": 1000, "height_mm": 500,
            "quantity": 1, "vinyl_id": "black-610"}
    data.update(fields)
    return SignRequest(**data)


def _price(request, settings=None):
    return PricingEngine().build_price_breakdown(
        request, _sample_media(), _sample_substrates(), settings or _sample_settings(),
    )


# ============================================================
# 1-3. Scenario: solid colour cut vinyl
# ============================================================

def test_solid_cut_vinyl_roll_length():
    breakdown = _price(_request())
    assert breakdown.vinyl_lm == pytest.approx(0.505)
    assert breakdown.vinyl_lm_with_waste == pytest.approx(0.505)  # no waste on cut-only
    assert breakdown.effective_width_mm == 610
    assert breakdown.materials == round(0.505 * 3.2, 2)
    assert breakdown.ink == 0


def test_solid_cut_vinyl_totals():
    breakdown = _price(_request())
    # (1.616 x 2) + 5 setup + 0.25 cut = 8.482; delivery 100 cm band = 5
    assert breakdown.cutting == 0.25
    assert breakdown.pre_delivery == 8.48
    assert breakdown.delivery == 5
    assert breakdown.delivery_band == "100 cm"
    assert breakdown.total == 13.48
    assert breakdown.vat == 2.70
    assert breakdown.total_inc_vat == 16.18


def test_solid_cut_vinyl_cost_item():
    breakdown = _price(_request())
    assert len(breakdown.costs.vinyl) == 1
    item = breakdown.costs.vinyl[0]
    assert item.media == "Black Matt 610"
    assert item.lm == pytest.approx(0.505)
    assert breakdown.costs.substrate == []


# ============================================================
# 4-5. Scenario: printed vinyl on substrate
# ============================================================

def test_vinyl_on_substrate_half_sheet_charge():
    breakdown = _price(_request(
        mode=ProductMode.PRINTED_VINYL_ON_SUBSTRATE, width_mm=300, height_mm=300,
        vinyl_id="mono-1370", substrate_id="foamex-2440",
    ))
    assert breakdown.panels_per_sheet == 32
    assert breakdown.substrate_sheets_needed < 0.5
    assert breakdown.substrate_sheets_charged == 0.5
    assert breakdown.costs.substrate[0].cost == 9.0
    assert breakdown.costs.substrate[0].sheet == "2440×1220"
    assert "Half-sheet minimum charge applied" in breakdown.notes


def test_vinyl_on_substrate_combines_vinyl_and_sheet():
    breakdown = _price(_request(
        mode=ProductMode.PRINTED_VINYL_ON_SUBSTRATE, width_mm=300, height_mm=300,
        vinyl_id="mono-1370", substrate_id="foamex-2440",
    ))
    # 0.305 lm + 1 lm waste at 3.50, plus half a sheet at 18
    assert breakdown.vinyl_lm_with_waste == pytest.approx(1.305)
    assert breakdown.materials == pytest.approx(1.305 * 3.5 + 9.0, abs=0.01)
    assert breakdown.ink == pytest.approx(0.36)
    assert breakdown.sheet_usage_pct + breakdown.sheet_waste_pct == pytest.approx(100.0)


# ============================================================
# 6-10. Selection and geometry errors
# ============================================================

def test_substrate_only_without_substrate_fails():
    with pytest.raises(SelectionError):
        _price(_request(mode=ProductMode.SUBSTRATE_ONLY, vinyl_id=None))


def test_vinyl_mode_without_media_fails():
    with pytest.raises(SelectionError):
        _price(_request(vinyl_id=None))


def test_unknown_media_id_fails():
    with pytest.raises(SelectionError, match="no-such-roll"):
        _price(_request(vinyl_id="no-such-roll"))


def test_panel_larger_than_sheet_is_geometry_error():
    with pytest.raises(GeometryError):
        _price(_request(mode=ProductMode.SUBSTRATE_ONLY, width_mm=3000, height_mm=1500,
                        substrate_id="foamex-2440"))


def test_zero_printable_width_is_geometry_error():
    with pytest.raises(QuoteValidationError):
        _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="broken"))


def test_substrate_only_ignores_vinyl_selection():
    breakdown = _price(_request(mode=ProductMode.SUBSTRATE_ONLY, width_mm=300, height_mm=300,
                                vinyl_id="no-such-roll", substrate_id="foamex-2440"))
    assert breakdown.vinyl_lm is None
    assert breakdown.costs.vinyl == []


# ============================================================
# 11-14. Cutting
# ============================================================

def test_default_cut_fee_per_sign():
    breakdown = _price(_request(quantity=4))
    assert breakdown.cutting == 1.0
    assert "Cut option: None - 4 x £0.25 = £1.00" in breakdown.notes


def test_plotter_cut_replaces_default_fee():
    settings = _sample_settings(
        plotterCutSetup={"KissOnRoll": 10},
        plotterCutPerPiece={"KissOnRoll": 0.5},
        plotterPerimeterPerM=1,
    )
    breakdown = _price(_request(quantity=2, plotter_cut=PlotterCut.KISS_ON_ROLL), settings)
    # setup 10 + 2 x 0.50 + perimeter 2 x 3 m x 1.00
    assert breakdown.cutting == 17.0
    assert any(n.startswith("Cut option: KissOnRoll") for n in breakdown.notes)


def test_complexity_and_hem_eyelets_for_print_and_cut():
    settings = _sample_settings(complexityPerSticker={"Complex": 0.5}, hemEyeletsPerPiece=2)
    breakdown = _price(_request(mode=ProductMode.PRINT_AND_CUT_VINYL, vinyl_id="mono-1370",
                                quantity=3, complexity="Complex", hem_eyelets=True), settings)
    assert breakdown.cutting == pytest.approx(0.75 + 1.5 + 6.0)


def test_surcharges_skipped_for_printed_vinyl_only():
    settings = _sample_settings(complexityPerSticker={"Complex": 0.5}, hemEyeletsPerPiece=2)
    breakdown = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370",
                                quantity=3, complexity="Complex", hem_eyelets=True), settings)
    assert breakdown.cutting == 0.75


# ============================================================
# 15-17. Uplifts
# ============================================================

def test_finishing_uplift_on_accumulated_base():
    settings = _sample_settings(finishingUplifts={"IndividuallyCut": 0.1})
    breakdown = _price(_request(finishing="IndividuallyCut"), settings)
    # base = 1.616 materials + 0.25 cutting + 5 setup
    assert breakdown.finishing_uplift == round(0.1 * 6.866, 2)
    assert breakdown.pre_delivery == round(1.616 * 2 + 5 + 0.25 + 0.6866, 2)


def test_finishing_uplift_not_applied_to_substrate_only():
    settings = _sample_settings(finishingUplifts={"IndividuallyCut": 0.1})
    breakdown = _price(_request(mode=ProductMode.SUBSTRATE_ONLY, width_mm=300, height_mm=300,
                                substrate_id="foamex-2440", finishing="IndividuallyCut"), settings)
    assert breakdown.finishing_uplift == 0


def test_cutting_style_uplift_added_to_cutting():
    settings = _sample_settings(cuttingStyleUplifts={"Intricate": 0.15})
    breakdown = _price(_request(cutting_style="Intricate"), settings)
    assert breakdown.cutting == round(0.25 + 0.15 * 6.866, 2)


# ============================================================
# 18-22. Printed vinyl
# ============================================================

def test_printed_vinyl_adds_waste_allowance():
    breakdown = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370"))
    assert breakdown.vinyl_lm == pytest.approx(0.505)
    assert breakdown.vinyl_lm_with_waste == pytest.approx(1.505)
    assert breakdown.effective_width_mm == 1340


def test_double_sided_doubles_length_not_ink():
    single = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370"))
    double = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370",
                             double_sided=True))
    assert double.vinyl_lm == pytest.approx(2 * single.vinyl_lm)
    assert double.vinyl_lm_with_waste == pytest.approx(2.01)
    assert double.ink == single.ink == 2.0


def test_application_tape_and_white_backing():
    settings = _sample_settings(appTapePerLm=1, whiteBackingPerSqm=2)
    plain = _price(_request(mode=ProductMode.PRINT_AND_CUT_VINYL, vinyl_id="mono-1370"), settings)
    extras = _price(_request(mode=ProductMode.PRINT_AND_CUT_VINYL, vinyl_id="mono-1370",
                             application_tape=True, white_backing=True), settings)
    # tape on 0.505 lm produced, backing on 0.5 m2
    assert extras.materials == pytest.approx(plain.materials + 0.505 + 1.0, abs=0.01)


def test_printed_vinyl_only_charges_tape_and_backing():
    settings = _sample_settings(appTapePerLm=1, whiteBackingPerSqm=2)
    plain = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370"), settings)
    extras = _price(_request(mode=ProductMode.PRINTED_VINYL_ONLY, vinyl_id="mono-1370",
                             application_tape=True, white_backing=True), settings)
    assert extras.materials == pytest.approx(plain.materials + 0.505 + 1.0, abs=0.01)
    assert any(n.startswith("Application tape") for n in extras.notes)
    assert any(n.startswith("White backing") for n in extras.notes)


def test_solid_vinyl_never_charges_white_backing():
    settings = _sample_settings(whiteBackingPerSqm=2)
    plain = _price(_request(), settings)
    backed = _price(_request(white_backing=True), settings)
    assert backed.materials == plain.materials


# ============================================================
# 22-24. Delivery and VAT
# ============================================================

def test_delivery_sized_on_panel_for_substrate_modes():
    # whole sign 240 cm would be the 300 cm band; each 1200 mm panel ships in the 200 cm band
    breakdown = _price(_request(mode=ProductMode.SUBSTRATE_ONLY, width_mm=2400, height_mm=1200,
                                substrate_id="foamex-2440", panel_splits=2))
    assert breakdown.panel_width_mm == 1200
    assert breakdown.delivery_band == "200 cm"
    assert breakdown.delivery == 8


def test_on_a_roll_pays_base_fee_only():
    breakdown = _price(_request(width_mm=2000, height_mm=500, delivery_mode="OnARoll"))
    assert breakdown.delivery == 5


def test_vat_on_total():
    breakdown = _price(_request(quantity=3))
    assert breakdown.vat == pytest.approx(breakdown.total * 0.2, abs=0.01)
    assert breakdown.total_inc_vat == pytest.approx(breakdown.total + breakdown.vat, abs=0.011)


# ============================================================
# 25-26. Determinism and raw input
# ============================================================

def test_repeated_calls_are_identical():
    request = _request(mode=ProductMode.PRINTED_VINYL_ON_SUBSTRATE, width_mm=1800, height_mm=900,
                       quantity=5, vinyl_id="mono-1370", substrate_id="foamex-2440")
    first = _price(request)
    second = _price(request)
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_accepts_raw_request_and_raw_settings():
    breakdown = PricingEngine().build_price_breakdown(
        {"mode": "SubstrateOnly", "widthMm": 300, "heightMm": 300, "qty": 2,
         "substrateId": "foamex-2440"},
        _sample_media(),
        [s.model_dump() for s in _sample_substrates()],
        {"setupFee": "5", "profitMultiplier": 2},
    )
    assert breakdown.quantity == 2
    assert breakdown.substrate_sheets_charged == 0.5
    # half sheet 9.00 x 2 + 5 setup
    assert breakdown.pre_delivery == 23.0
