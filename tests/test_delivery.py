"""
Delivery band resolver tests.

Tests:
1-2.  Shipped size (longest side, girth)
3-8.  Band selection, inclusive thresholds, overflow, on-a-roll, no bands
"""

import pytest

from signquote.delivery import DeliveryBandResolver, shipped_size_cm
from signquote.models import DeliveryMeasure, DeliveryMode
from signquote.schemas import DeliveryBand, DeliveryRule


def _sample_rule():
    """Bands deliberately out of order; the resolver sorts them."""
    return DeliveryRule(
        base_fee=5,
        bands=[
            DeliveryBand(max_cm=200, charge=3, name="Large"),
            DeliveryBand(max_cm=100, charge=1, name="Small"),
            DeliveryBand(max_cm=150, charge=2, name="Medium"),
        ],
    )


# ============================================================
# 1-2. Shipped size
# ============================================================

def test_longest_side_in_cm():
    assert shipped_size_cm(1000, 500) == 100
    assert shipped_size_cm(300, 1200, DeliveryMeasure.LONGEST_SIDE) == 120


def test_girth_adds_thickness():
    assert shipped_size_cm(1000, 500, DeliveryMeasure.GIRTH, 10) == pytest.approx(151.0)


# ============================================================
# 3-8. Band selection
# ============================================================

@pytest.mark.parametrize("size_cm,band,price", [
    (50, "Small", 6),
    (100, "Small", 6),
    (120, "Medium", 7),
    (150, "Medium", 7),
    (200, "Large", 8),
    (201, "Large", 8),
])
def test_band_selection(size_cm, band, price):
    result = DeliveryBandResolver().resolve(_sample_rule(), size_cm)
    assert result["band"] == band
    assert result["price"] == price


def test_on_a_roll_waives_band_charge():
    result = DeliveryBandResolver().resolve(_sample_rule(), 150, DeliveryMode.ON_A_ROLL)
    assert result["band"] == "Medium"
    assert result["charge"] == 0
    assert result["price"] == 5


def test_no_bands_charges_base_only():
    result = DeliveryBandResolver().resolve(DeliveryRule(base_fee=4.5), 999)
    assert result == {"band": "Standard", "charge": 0.0, "price": 4.5}
