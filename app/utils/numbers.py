"""
Numeric helpers for soil display values.

Soil metrics are stored as display strings ("210 kg/ha", "0.45%"), so the
analyzer needs to pull numbers out of them and write numbers back with a
fixed number of decimals.
"""
import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?")


def parse_leading_number(text: Union[str, float, int]) -> float:
    """
    Extract the first signed decimal number from a display string.

    Args:
        text: Display string such as "210 kg/ha", or an already numeric value

    Returns:
        The parsed number, or 0.0 if the string holds no numeric token
    """
    if isinstance(text, (int, float)):
        return float(text)

    match = _NUMBER_PATTERN.search(text)
    if match is None:
        logger.warning(f"No numeric value in {text!r}, falling back to 0")
        return 0.0
    return float(match.group(0))


def split_unit_suffix(text: str) -> str:
    """Return whatever follows the first numeric token ("210 kg/ha" -> " kg/ha")."""
    match = _NUMBER_PATTERN.search(text)
    if match is None:
        return ""
    return text[match.end():]


def format_fixed(value: float, places: int) -> str:
    """
    Format a float with a fixed number of decimals.

    Ties on the exact binary value round away from zero, so 2.5 -> "3"
    rather than Python's banker's "2".
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:.{places}f}"
