"""
Field-area unit conversion.

Factors convert square meters into the target unit.
"""
from app.utils.numbers import format_fixed


AREA_CONVERSION_FACTORS: dict[str, float] = {
    "sq_m": 1.0,
    "sq_ft": 10.7639,
    "acres": 0.000247105,
    "hectares": 0.0001,
    "bigha": 0.000074752,
    "katha": 0.00149505,
}


def convert_area(area_m2: float, unit: str) -> float:
    """
    Convert an area in square meters to another unit.

    Raises:
        ValueError: If the unit is unknown
    """
    try:
        factor = AREA_CONVERSION_FACTORS[unit]
    except KeyError:
        raise ValueError(
            f"Unknown area unit '{unit}'. "
            f"Expected one of: {', '.join(AREA_CONVERSION_FACTORS)}"
        ) from None
    return area_m2 * factor


def format_area(area_m2: float, unit: str) -> str:
    """Two-decimal display string for a field area; "0.00" when there is no field yet."""
    if area_m2 <= 0:
        # Still reject unknown units for an empty field
        convert_area(0.0, unit)
        return "0.00"
    return format_fixed(convert_area(area_m2, unit), 2)
