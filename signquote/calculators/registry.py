"""
Calculator registry — maps each ProductMode to its calculator class.

The mode set is closed: every ProductMode has exactly one calculator.
"""

from ..models import ProductMode
from .base import BaseCalculator
from .print_and_cut import PrintAndCutVinylCalculator
from .printed_vinyl_only import PrintedVinylOnlyCalculator
from .solid_cut_vinyl import SolidColourCutVinylCalculator
from .substrate_only import SubstrateOnlyCalculator
from .vinyl_on_substrate import PrintedVinylOnSubstrateCalculator

CALCULATOR_REGISTRY: dict[ProductMode, type] = {
    ProductMode.SOLID_COLOUR_CUT_VINYL: SolidColourCutVinylCalculator,
    ProductMode.PRINT_AND_CUT_VINYL: PrintAndCutVinylCalculator,
    ProductMode.PRINTED_VINYL_ONLY: PrintedVinylOnlyCalculator,
    ProductMode.PRINTED_VINYL_ON_SUBSTRATE: PrintedVinylOnSubstrateCalculator,
    ProductMode.SUBSTRATE_ONLY: SubstrateOnlyCalculator,
}


def get_calculator(mode) -> BaseCalculator:
    """Returns an instance of the calculator for a product mode, or raises ValueError."""
    try:
        mode = ProductMode(mode)
    except ValueError:
        raise ValueError(
            f"No calculator registered for product mode: {mode}. "
            f"Available: {list_calculators()}"
        )
    return CALCULATOR_REGISTRY[mode]()


def has_calculator(mode) -> bool:
    """Check if a calculator exists for a product mode."""
    return str(getattr(mode, "value", mode)) in list_calculators()


def list_calculators() -> list[str]:
    """List all registered product modes."""
    return [m.value for m in CALCULATOR_REGISTRY]
