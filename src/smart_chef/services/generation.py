"""Meal generation strategies and the request entry point."""

import logging
import random
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Protocol

from smart_chef.domain.meals import (
    GeneratedMeal,
    IngredientInput,
    IngredientNutrition,
    MealRequest,
    NutritionSummary,
)
from smart_chef.services.ai_ideas import AiIdeaGenerator
from smart_chef.services.app_log import AppLogService
from smart_chef.services.composer import MealComposer
from smart_chef.services.ingredients import require_ingredients
from smart_chef.services.nutrition import NutritionResolver
from smart_chef.services.scaling import (
    CHEF_BOUNDS,
    SIMPLE_BOUNDS,
    ScalingBounds,
    scale_to_target,
)
from smart_chef.services.users import UserService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Complement:
    """Fixed side dish appended to single-ingredient simple meals."""

    name: str
    quantity: Decimal
    unit: str
    calories: Decimal
    protein_g: Decimal
    carbs_g: Decimal
    fat_g: Decimal


def _complement(  # noqa: PLR0913
    name: str,
    quantity: str,
    unit: str,
    calories: int,
    protein: int,
    carbs: int,
    fat: int,
) -> Complement:
    return Complement(
        name=f"{name} (AI addition)",
        quantity=Decimal(quantity),
        unit=unit,
        calories=Decimal(calories),
        protein_g=Decimal(protein),
        carbs_g=Decimal(carbs),
        fat_g=Decimal(fat),
    )


COMPLEMENT_SETS: tuple[tuple[Complement, ...], ...] = (
    (
        _complement("Herbed Quinoa", "1", "cup cooked", 215, 8, 39, 3),
        _complement("Roasted Seasonal Vegetables", "1", "cup", 85, 3, 14, 3),
    ),
    (
        _complement("Garlic Brown Rice", "0.75", "cup cooked", 170, 4, 35, 2),
        _complement("Steamed Broccoli & Carrots", "1", "cup", 55, 3, 11, 1),
    ),
    (
        _complement("Wholegrain Pasta", "1", "cup cooked", 210, 7, 40, 3),
        _complement("Mixed Leaf Salad with Olive Oil", "1", "cup", 95, 2, 7, 6),
    ),
)


class MealGenerationMode(StrEnum):
    """Available generation strategies."""

    SIMPLE = "simple"
    CHEF = "chef"

    @classmethod
    def parse(cls, value: str | None) -> "MealGenerationMode":
        """Map a mode name to a strategy; unknown names use the simple mode."""
        normalized = (value or "").strip().lower()
        if normalized in {"chef", "rich"}:
            return cls.CHEF
        return cls.SIMPLE


class MealGenerator(Protocol):
    """Common contract for generation strategies."""

    async def generate(self, request: MealRequest) -> GeneratedMeal:
        """Generate a meal for a normalized request."""


@dataclass
class SimpleMealGenerator(MealGenerator):
    """Template-based generation without an AI backend."""

    resolver: NutritionResolver
    composer: MealComposer
    bounds: ScalingBounds = SIMPLE_BOUNDS
    rng: random.Random = field(default_factory=random.Random)
    add_complements: bool = False

    async def generate(self, request: MealRequest) -> GeneratedMeal:
        """Resolve nutrition, scale it and compose a templated meal."""
        summary, items = await self.resolver.resolve(
            request.ingredients, request.calorie_target
        )
        if self.add_complements and len(request.ingredients) == 1:
            request = self._with_complements(request, summary, items)
        scale_to_target(summary, items, request.calorie_target, self.bounds)

        meal = self.composer.compose(request, summary, items)
        _logger.info(
            "Generated simple meal %s with %s ingredients and %s calories",
            meal.title,
            len(meal.ingredients),
            meal.nutrition.total_calories,
        )
        return meal

    def _with_complements(
        self,
        request: MealRequest,
        summary: NutritionSummary,
        items: list[IngredientNutrition],
    ) -> MealRequest:
        ingredients = list(request.ingredients)
        for complement in self.rng.choice(COMPLEMENT_SETS):
            ingredients.append(
                IngredientInput(
                    name=complement.name,
                    quantity=complement.quantity,
                    unit=complement.unit,
                )
            )
            items.append(
                IngredientNutrition(
                    name=complement.name,
                    calories=complement.calories,
                    protein_g=complement.protein_g,
                    carbs_g=complement.carbs_g,
                    fat_g=complement.fat_g,
                )
            )
            summary.total_calories += complement.calories
            summary.total_protein_g += complement.protein_g
            summary.total_carbs_g += complement.carbs_g
            summary.total_fat_g += complement.fat_g
        return MealRequest(
            ingredients=ingredients, calorie_target=request.calorie_target
        )


@dataclass
class ChefMealGenerator(MealGenerator):
    """Generation that overlays an AI meal idea on computed nutrition."""

    resolver: NutritionResolver
    composer: MealComposer
    idea_generator: AiIdeaGenerator
    bounds: ScalingBounds = CHEF_BOUNDS

    async def generate(self, request: MealRequest) -> GeneratedMeal:
        """Resolve and scale nutrition, then merge in any AI idea."""
        summary, items = await self.resolver.resolve(
            request.ingredients, request.calorie_target
        )
        scale_to_target(summary, items, request.calorie_target, self.bounds)
        idea = await self.idea_generator.generate(
            request.ingredients, summary, request.calorie_target
        )

        meal = self.composer.compose(request, summary, items, idea)
        _logger.info(
            "Generated chef meal %s with %s ingredients and %s calories (ai=%s)",
            meal.title,
            len(meal.ingredients),
            meal.nutrition.total_calories,
            idea is not None,
        )
        return meal


@dataclass
class MealGenerationService:
    """Entry point that validates requests and dispatches to a strategy."""

    generators: dict[MealGenerationMode, MealGenerator]
    user_service: UserService
    app_log: AppLogService

    async def generate(  # noqa: PLR0913
        self,
        ingredients: list[IngredientInput],
        *,
        mode: MealGenerationMode = MealGenerationMode.SIMPLE,
        calorie_target: Decimal = Decimal(0),
        use_user_calorie_target: bool = False,
        user_id: int | None = None,
    ) -> GeneratedMeal:
        """Generate a meal.

        Raises IngredientValidationError when no ingredient has a name.
        """
        normalized = require_ingredients(ingredients)
        target = calorie_target
        if use_user_calorie_target:
            stored = self.user_service.get_calorie_target(user_id)
            if stored is not None:
                target = stored

        generator = self.generators[mode]
        meal = await generator.generate(
            MealRequest(ingredients=normalized, calorie_target=target)
        )
        self.app_log.information(
            f"{mode.value.upper()} meal generated for user {user_id}: {meal.title}"
        )
        return meal
