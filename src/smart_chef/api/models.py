"""Pydantic models for the meal generation API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from smart_chef.domain.meals import GeneratedMeal, IngredientInput


class IngredientPayload(BaseModel):
    """Ingredient supplied in a generation request."""

    name: str = Field(default="", max_length=200)
    quantity: Decimal | None = Field(default=None, ge=0, le=100000)
    unit: str | None = Field(default=None, max_length=50)

    def to_domain(self) -> IngredientInput:
        """Convert to the domain ingredient."""
        return IngredientInput(name=self.name, quantity=self.quantity, unit=self.unit)


class MealGenerationPayload(BaseModel):
    """Meal generation request body."""

    ingredients: list[IngredientPayload] = Field(default_factory=list)
    calorie_target: Decimal = Field(default=Decimal(0), ge=0, le=20000)
    use_user_calorie_target: bool = False
    user_id: int | None = None


class NutritionResponse(BaseModel):
    """Aggregate macros."""

    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float


class MealIngredientResponse(BaseModel):
    """Ingredient line of a generated meal."""

    name: str
    amount: float | None
    unit: str | None
    calories: float | None


class MealInstructionResponse(BaseModel):
    """Numbered cooking step."""

    step_number: int
    text: str


class GeneratedMealResponse(BaseModel):
    """Generated meal returned to API callers."""

    mode: str
    title: str
    description: str
    input_summary: str
    nutrition: NutritionResponse
    ingredients: list[MealIngredientResponse]
    instructions: list[MealInstructionResponse]
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_meal(
        cls, meal: GeneratedMeal, mode: str, warnings: list[str]
    ) -> "GeneratedMealResponse":
        """Build the response from a domain meal."""
        return cls(
            mode=mode,
            title=meal.title,
            description=meal.description,
            input_summary=meal.input_summary,
            nutrition=NutritionResponse(
                total_calories=float(meal.nutrition.total_calories),
                total_protein_g=float(meal.nutrition.total_protein_g),
                total_carbs_g=float(meal.nutrition.total_carbs_g),
                total_fat_g=float(meal.nutrition.total_fat_g),
            ),
            ingredients=[
                MealIngredientResponse(
                    name=ingredient.name,
                    amount=_optional_float(ingredient.amount),
                    unit=ingredient.unit,
                    calories=_optional_float(ingredient.calories),
                )
                for ingredient in meal.ingredients
            ],
            instructions=[
                MealInstructionResponse(step_number=step.step_number, text=step.text)
                for step in meal.instructions
            ],
            warnings=warnings,
        )


def _optional_float(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None
