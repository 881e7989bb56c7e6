"""Meal generation domain models."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class IngredientInput:
    """An ingredient supplied by the caller."""

    name: str
    quantity: Decimal | None = None
    unit: str | None = None


@dataclass
class IngredientNutrition:
    """Macros resolved for a single ingredient."""

    name: str
    calories: Decimal
    protein_g: Decimal
    carbs_g: Decimal
    fat_g: Decimal


@dataclass
class NutritionSummary:
    """Aggregate macros for a meal."""

    total_calories: Decimal = Decimal(0)
    total_protein_g: Decimal = Decimal(0)
    total_carbs_g: Decimal = Decimal(0)
    total_fat_g: Decimal = Decimal(0)

    @classmethod
    def from_items(cls, items: list[IngredientNutrition]) -> "NutritionSummary":
        """Sum per-ingredient macros into a summary."""
        return cls(
            total_calories=sum((item.calories for item in items), Decimal(0)),
            total_protein_g=sum((item.protein_g for item in items), Decimal(0)),
            total_carbs_g=sum((item.carbs_g for item in items), Decimal(0)),
            total_fat_g=sum((item.fat_g for item in items), Decimal(0)),
        )


@dataclass(frozen=True)
class AiMealIngredient:
    """Ingredient suggested by the AI backend."""

    name: str
    amount: Decimal | None = None
    unit: str | None = None


@dataclass(frozen=True)
class AiMealIdea:
    """Creative overlay returned by the AI backend."""

    title: str
    description: str
    instructions: list[str] = field(default_factory=list)
    ingredients: list[AiMealIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class MealIngredient:
    """Ingredient line of a generated meal."""

    name: str
    amount: Decimal | None
    unit: str | None
    calories: Decimal | None


@dataclass(frozen=True)
class MealInstruction:
    """Numbered cooking step."""

    step_number: int
    text: str


@dataclass
class GeneratedMeal:
    """Final meal artifact returned to callers."""

    title: str
    description: str
    input_summary: str
    nutrition: NutritionSummary
    ingredients: list[MealIngredient]
    instructions: list[MealInstruction]


@dataclass(frozen=True)
class MealRequest:
    """Normalized meal generation request."""

    ingredients: list[IngredientInput]
    calorie_target: Decimal = Decimal(0)
