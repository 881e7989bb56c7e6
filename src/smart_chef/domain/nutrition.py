"""Nutrition domain models."""

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class NutritionFacts:
    """Macros reported by an external nutrition source."""

    calories: Decimal
    protein_g: Decimal
    carbs_g: Decimal
    fat_g: Decimal

    def is_plausible(self) -> bool:
        """Return True when no macro is negative and at least one is positive."""
        values = (self.calories, self.protein_g, self.carbs_g, self.fat_g)
        if any(value < 0 for value in values):
            return False
        return any(value > 0 for value in values)


def round2(value: Decimal) -> Decimal:
    """Round to two decimals using banker's rounding."""
    return value.quantize(_CENT, rounding=ROUND_HALF_EVEN)


def parse_decimal(value: object) -> Decimal:
    """Convert a JSON number or numeric string to Decimal.

    Missing values count as zero. Raises ValueError for anything else.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise ValueError(f"Unexpected boolean nutrient value: {value!r}")
    if isinstance(value, int | float | str):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid nutrient value: {value!r}") from exc
        if not parsed.is_finite():
            raise ValueError(f"Invalid nutrient value: {value!r}")
        return parsed
    raise ValueError(f"Unexpected nutrient value type: {type(value).__name__}")


def format_amount(value: Decimal) -> str:
    """Format with at most two decimals and no trailing zeros."""
    return f"{round2(value).normalize():f}"
