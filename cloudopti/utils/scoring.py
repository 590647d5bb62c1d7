"""
Numeric helpers shared by the cost model, ranker and orchestrator.
Every [0, 1] score in the engine passes through clamp().
"""
from typing import Callable, Iterable, TypeVar
import math


T = TypeVar("T")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """
    Constrain a value to the closed interval [low, high].
    
    Args:
        value: Value to constrain
        low: Lower bound (inclusive)
        high: Upper bound (inclusive)
    
    Returns:
        value, low or high
    
    Raises:
        ValueError: If value is NaN or the bounds are inverted
    """
    if math.isnan(value):
        raise ValueError("clamp received NaN")
    if low > high:
        raise ValueError(f"clamp bounds are inverted: low={low}, high={high}")
    return max(low, min(high, value))


def ratio(items: Iterable[T], predicate: Callable[[T], bool]) -> float:
    """Fraction of items matching predicate; 0.0 for an empty iterable."""
    items = list(items)
    if not items:
        return 0.0
    return sum(1 for item in items if predicate(item)) / len(items)


def round_money(amount: float) -> float:
    """Round a USD amount to cents for serialization."""
    return round(amount, 2)
