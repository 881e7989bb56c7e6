"""Scale meal macros toward a calorie target."""

from dataclasses import dataclass
from decimal import Decimal

from smart_chef.domain.meals import IngredientNutrition, NutritionSummary
from smart_chef.domain.nutrition import round2


@dataclass(frozen=True)
class ScalingBounds:
    """Inclusive clamp range for the scaling factor."""

    low: Decimal
    high: Decimal

    def __post_init__(self) -> None:
        if self.low <= 0 or self.low > self.high:
            raise ValueError(f"Invalid scaling bounds: [{self.low}, {self.high}]")

    @classmethod
    def of(
        cls, low: float | str | Decimal, high: float | str | Decimal
    ) -> "ScalingBounds":
        """Build bounds from config values."""
        return cls(low=Decimal(str(low)), high=Decimal(str(high)))

    def clamp(self, value: Decimal) -> Decimal:
        """Clamp a factor into the range."""
        return min(max(value, self.low), self.high)


SIMPLE_BOUNDS = ScalingBounds(Decimal("0.5"), Decimal("1.5"))
CHEF_BOUNDS = ScalingBounds(Decimal("0.6"), Decimal("1.4"))


def scale_to_target(
    summary: NutritionSummary,
    items: list[IngredientNutrition],
    calorie_target: Decimal,
    bounds: ScalingBounds,
) -> Decimal | None:
    """Scale summary and ingredient macros in place.

    Returns the applied factor, or None when the target or the current
    calories are not positive and nothing was changed. Every product is
    rounded to two decimals individually.
    """
    if calorie_target <= 0 or summary.total_calories <= 0:
        return None

    factor = bounds.clamp(calorie_target / summary.total_calories)

    summary.total_calories = round2(summary.total_calories * factor)
    summary.total_protein_g = round2(summary.total_protein_g * factor)
    summary.total_carbs_g = round2(summary.total_carbs_g * factor)
    summary.total_fat_g = round2(summary.total_fat_g * factor)

    for item in items:
        item.calories = round2(item.calories * factor)
        item.protein_g = round2(item.protein_g * factor)
        item.carbs_g = round2(item.carbs_g * factor)
        item.fat_g = round2(item.fat_g * factor)

    return factor
