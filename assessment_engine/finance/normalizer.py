"""
Frequency normalization.
Converts amounts recorded at any cadence into monthly equivalents.
"""

from typing import Union

from ..config.engine_config import FREQUENCY_CONFIG
from ..models.enums import Frequency


MONTHLY_FACTORS = {
    Frequency(name): factor
    for name, factor in FREQUENCY_CONFIG["monthly_factors"].items()
}


def normalize(amount: float, frequency: Union[Frequency, str]) -> float:
    """
    Convert an amount to its monthly equivalent.

    One-time amounts contribute 0 to recurring monthly totals. No rounding is
    applied here; callers round at presentation.

    Args:
        amount: Amount as recorded
        frequency: Cadence of the amount (enum member or string)

    Returns:
        Monthly equivalent amount

    Raises:
        UnrecognizedFrequency: If the frequency is unknown
    """
    return amount * MONTHLY_FACTORS[Frequency.parse(frequency)]


def annualize(amount: float, frequency: Union[Frequency, str]) -> float:
    """Annual equivalent of an amount; a one-time amount counts once."""
    freq = Frequency.parse(frequency)
    if freq == Frequency.ONE_TIME:
        return amount
    return normalize(amount, freq) * 12


def is_recurring(frequency: Union[Frequency, str]) -> bool:
    return Frequency.parse(frequency) != Frequency.ONE_TIME
