"""
Settings normalizer — raw cost settings to one canonical Configuration.

Raw settings arrive from uploaded costs files and older exports, so the same
value can appear under its canonical snake_case name, its camelCase name, or
a deprecated synonym. FIELD_ALIASES fixes the precedence once; nothing
downstream looks at raw keys again.

normalize_settings() is idempotent: a Configuration passes through as is,
and normalizing Configuration.model_dump() gives back an equal Configuration.
"""

import logging
import math
from collections.abc import Mapping

from .models import Finishing, Complexity, PlotterCut, CuttingStyle, DeliveryMeasure
from .schemas import Configuration, DeliveryBand, DeliveryRule

logger = logging.getLogger(__name__)


# Canonical field -> accepted raw keys, highest precedence first.
FIELD_ALIASES = {
    "master_max_print_width_mm": ("master_max_print_width_mm", "masterMaxPrintWidthMm"),
    "master_max_cut_width_mm": ("master_max_cut_width_mm", "masterMaxCutWidthMm"),
    "vinyl_margin_mm": ("vinyl_margin_mm", "vinylMarginMm"),
    "substrate_margin_mm": ("substrate_margin_mm", "substrateMarginMm"),
    "tile_overlap_mm": ("tile_overlap_mm", "tileOverlapMm"),
    "vinyl_waste_lm_per_job": ("vinyl_waste_lm_per_job", "vinylWasteLmPerJob"),
    "setup_fee": ("setup_fee", "setupFee"),
    "cut_per_sign": ("cut_per_sign", "cutPerSign"),
    "ink_per_sqm": ("ink_per_sqm", "inkElecPerSqm", "ink_cost_per_sqm", "inkCostPerSqm"),
    "app_tape_per_sqm": ("app_tape_per_sqm", "appTapePerSqm",
                         "application_tape_per_sqm", "applicationTapePerSqm"),
    "app_tape_per_lm": ("app_tape_per_lm", "appTapePerLm",
                        "application_tape_per_lm", "applicationTapePerLm"),
    "white_backing_per_sqm": ("white_backing_per_sqm", "whiteBackingPerSqm"),
    "white_backing_per_lm": ("white_backing_per_lm", "whiteBackingPerLm"),
    "hem_eyelets_per_piece": ("hem_eyelets_per_piece", "hemEyeletsPerPiece"),
    "plotter_perimeter_per_m": ("plotter_perimeter_per_m", "plotterPerimeterPerM"),
    "profit_multiplier": ("profit_multiplier", "profitMultiplier"),
    "vat_rate_pct": ("vat_rate_pct", "vatRatePct"),
}

# Option-keyed rate maps: canonical field -> (key enumeration, accepted raw keys)
MAP_ALIASES = {
    "finishing_uplifts": (Finishing, ("finishing_uplifts", "finishingUplifts")),
    "complexity_per_unit": (Complexity, ("complexity_per_unit", "complexityPerUnit",
                                         "complexityPerSticker")),
    "plotter_cut_per_piece": (PlotterCut, ("plotter_cut_per_piece", "plotterCutPerPiece")),
    "plotter_cut_setup": (PlotterCut, ("plotter_cut_setup", "plotterCutSetup")),
    "cutting_style_uplifts": (CuttingStyle, ("cutting_style_uplifts", "cuttingStyleUplifts")),
}

NESTED_DELIVERY_KEYS = ("delivery", "delivery_rule", "deliveryRule")
FLAT_DELIVERY_BASE_KEYS = ("delivery_base", "deliveryBase")
FLAT_DELIVERY_BANDS_KEYS = ("delivery_bands", "deliveryBands")
DELIVERY_MEASURE_KEYS = ("delivery_measure", "deliveryMeasure")
BAND_THRESHOLD_KEYS = ("max_cm", "maxCm", "max_girth_cm", "maxGirthCm", "max_sum_cm", "maxSumCm")


def _num(value, fallback=None):
    """Coerce a raw value to a finite float, or return fallback."""
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        value = value.strip().replace("£", "").replace(",", "")
        if not value:
            return fallback
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    return n if math.isfinite(n) else fallback


def _threshold(band: Mapping) -> float:
    """Band upper bound in cm; a missing bound means unbounded."""
    for key in BAND_THRESHOLD_KEYS:
        if key in band and band[key] is not None:
            try:
                n = float(band[key])
            except (TypeError, ValueError):
                continue
            if not math.isnan(n):
                return n
    return math.inf


def _band_name(band: Mapping, max_cm: float) -> str:
    name = band.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    if math.isinf(max_cm):
        return "Oversize"
    return f"{round(max_cm)} cm"


def _first_number(src: Mapping, keys, fallback=None):
    for key in keys:
        if key in src:
            n = _num(src[key])
            if n is not None:
                return n
    return fallback


def _first_of_type(src: Mapping, keys, kind):
    for key in keys:
        value = src.get(key)
        if isinstance(value, kind):
            return value
    return None


def _normalize_scalars(src: Mapping) -> dict:
    defaults = Configuration.model_fields
    out = {}
    for field, keys in FIELD_ALIASES.items():
        value = _first_number(src, keys, defaults[field].default)
        if field == "profit_multiplier":
            value = value if value > 0 else 1.0
        else:
            value = max(0.0, value)
        out[field] = value
    return out


def _normalize_option_map(field: str, enum_cls, src) -> dict:
    """Validate a rate map against its enumeration; drop unknown, invalid and zero entries."""
    if not isinstance(src, Mapping):
        return {}
    by_value = {str(getattr(k, "value", k)): v for k, v in src.items()}
    known = {m.value for m in enum_cls}
    for key in by_value:
        if key not in known:
            logger.warning("Dropping unknown %s key %r", field, key)

    out = {}
    for member in enum_cls:
        if member.value not in by_value:
            continue
        rate = _num(by_value[member.value])
        if rate is None:
            logger.warning("Dropping non-numeric %s[%s]: %r", field, member.value, by_value[member.value])
            continue
        rate = max(0.0, rate)
        if rate:
            out[member] = rate
    return out


def _normalize_measure(value) -> DeliveryMeasure:
    if value is None:
        return DeliveryMeasure.LONGEST_SIDE
    try:
        return DeliveryMeasure(getattr(value, "value", value))
    except ValueError:
        logger.warning("Unknown delivery measure %r, using %s", value, DeliveryMeasure.LONGEST_SIDE.value)
        return DeliveryMeasure.LONGEST_SIDE


def _nested_band(band: Mapping, base_fee: float) -> DeliveryBand:
    max_cm = _threshold(band)
    charge = _num(band.get("charge"))
    if charge is None:
        charge = _num(band.get("surcharge"))
    if charge is None:
        price = _num(band.get("price"))
        # Absolute band price -> charge on top of the base fee
        charge = price - base_fee if price is not None else 0.0
    return DeliveryBand(max_cm=max_cm, charge=max(0.0, charge), name=_band_name(band, max_cm))


def _normalize_delivery(src: Mapping) -> DeliveryRule:
    flat_base = _first_number(src, FLAT_DELIVERY_BASE_KEYS)
    nested = None
    for key in NESTED_DELIVERY_KEYS:
        value = src.get(key)
        if isinstance(value, Mapping) and isinstance(value.get("bands"), (list, tuple)):
            nested = value
            break

    if nested is not None:
        base_fee = _first_number(nested, ("base_fee", "baseFee"), flat_base or 0.0)
        measure = nested.get("measure", _first_of_type(src, DELIVERY_MEASURE_KEYS, (str, DeliveryMeasure)))
        bands = [
            _nested_band(b, base_fee) for b in nested["bands"] if isinstance(b, Mapping)
        ]
    else:
        flat_bands = _first_of_type(src, FLAT_DELIVERY_BANDS_KEYS, (list, tuple))
        if flat_bands is not None:
            base_fee = flat_base or 0.0
            bands = []
            for b in flat_bands:
                if not isinstance(b, Mapping):
                    continue
                max_cm = _threshold(b)
                # Legacy surcharges are additive to the legacy base
                surcharge = max(0.0, _num(b.get("surcharge"), 0.0))
                bands.append(DeliveryBand(max_cm=max_cm, charge=surcharge, name=_band_name(b, max_cm)))
        else:
            base_fee = 0.0
            bands = []
        measure = _first_of_type(src, DELIVERY_MEASURE_KEYS, (str, DeliveryMeasure))

    bands.sort(key=lambda b: b.max_cm)
    return DeliveryRule(
        base_fee=max(0.0, base_fee),
        measure=_normalize_measure(measure),
        bands=bands,
    )


def normalize_settings(raw=None) -> Configuration:
    """
    Reconcile raw cost settings into a canonical Configuration.

    Args:
        raw: a mapping of raw settings (any mix of canonical, camelCase and
             legacy keys), None, or an already-canonical Configuration.

    Returns:
        Configuration with every field populated.
    """
    if isinstance(raw, Configuration):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise TypeError(f"Cost settings must be a mapping, got {type(raw).__name__}")

    fields = _normalize_scalars(raw)
    for field, (enum_cls, keys) in MAP_ALIASES.items():
        fields[field] = _normalize_option_map(field, enum_cls, _first_of_type(raw, keys, Mapping))
    fields["delivery"] = _normalize_delivery(raw)

    return Configuration(**fields)
