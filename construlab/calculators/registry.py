"""
Calculator registry — maps structure modes to calculator classes.
"""

from .slab import SlabCalculator
from .box import BoxCalculator
from .base import BaseCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "slab": SlabCalculator,
    "box": BoxCalculator,
}


def get_calculator(mode: str) -> BaseCalculator:
    """Returns an instance of the calculator for a mode, or raises ValueError."""
    if mode not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for mode: {mode}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[mode]()


def has_calculator(mode: str) -> bool:
    """Check if a calculator exists for a mode."""
    return mode in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    """List all registered calculator modes."""
    return list(CALCULATOR_REGISTRY.keys())
