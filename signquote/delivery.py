"""
Delivery band resolver — maps the shipped item's size to a priced band.

Bands are upper bounds in centimetres, inclusive. An item bigger than every
band falls into the last (largest) band rather than being refused. Items
shipped on a roll only pay the base fee; the band charge covers boxing.
"""

from .models import DeliveryMeasure, DeliveryMode

NO_BAND_NAME = "Standard"


def shipped_size_cm(width_mm: float, height_mm: float,
                    measure: DeliveryMeasure = DeliveryMeasure.LONGEST_SIDE,
                    thickness_mm: float = 10.0) -> float:
    """Size used for band lookup: longest side, or girth (w + h + thickness)."""
    if measure == DeliveryMeasure.GIRTH:
        return (width_mm + height_mm + thickness_mm) / 10.0
    return max(width_mm, height_mm) / 10.0


class DeliveryBandResolver:
    """Resolves the delivery band and price for one shipment."""

    def resolve(self, rule, size_cm: float,
                delivery_mode: DeliveryMode = DeliveryMode.BOXED) -> dict:
        """
        Args:
            rule: DeliveryRule (base_fee + bands)
            size_cm: shipped size in cm (see shipped_size_cm)
            delivery_mode: Boxed pays the band charge, OnARoll waives it

        Returns:
            {"band": str, "charge": float, "price": float}
        """
        bands = sorted(rule.bands, key=lambda b: b.max_cm)
        if not bands:
            return {"band": NO_BAND_NAME, "charge": 0.0, "price": rule.base_fee}

        hit = next((b for b in bands if size_cm <= b.max_cm), bands[-1])
        charge = 0.0 if delivery_mode == DeliveryMode.ON_A_ROLL else hit.charge
        return {
            "band": hit.name,
            "charge": charge,
            "price": rule.base_fee + charge,
        }
