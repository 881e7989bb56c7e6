"""Nutrition resolution with deterministic fallback estimates."""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from smart_chef.domain.meals import (
    IngredientInput,
    IngredientNutrition,
    NutritionSummary,
)
from smart_chef.domain.nutrition import NutritionFacts, round2
from smart_chef.domain.results import Failure, Result
from smart_chef.services.app_log import AppLogService

_logger = logging.getLogger(__name__)

AUTO_BALANCED_NAME = "Balanced macros (auto)"

_MIN_QUANTITY_SCALE = Decimal("0.1")
_KCAL_PER_GRAM_PROTEIN = Decimal(4)
_KCAL_PER_GRAM_CARBS = Decimal(4)
_KCAL_PER_GRAM_FAT = Decimal(9)


class NutritionSource(Protocol):
    """Interface for external nutrition lookups."""

    async def lookup(self, ingredient: IngredientInput) -> Result[list[NutritionFacts]]:
        """Return candidate nutrition records for an ingredient."""


class NutritionLookupError(RuntimeError):
    """Raised when a lookup fails and the resolver is configured not to fall back."""


@dataclass(frozen=True)
class MacroSplit:
    """Share of calories attributed to each macro."""

    protein: Decimal
    carbs: Decimal
    fat: Decimal

    def to_grams(self, calories: Decimal) -> tuple[Decimal, Decimal, Decimal]:
        """Return rounded protein, carbs and fat grams for the calories."""
        return (
            round2(calories * self.protein / _KCAL_PER_GRAM_PROTEIN),
            round2(calories * self.carbs / _KCAL_PER_GRAM_CARBS),
            round2(calories * self.fat / _KCAL_PER_GRAM_FAT),
        )


FALLBACK_SPLIT = MacroSplit(Decimal("0.3"), Decimal("0.4"), Decimal("0.3"))
TARGET_SPLIT = MacroSplit(Decimal("0.35"), Decimal("0.4"), Decimal("0.25"))


def stable_hash(value: str) -> int:
    """Polynomial string hash over UTF-16 code units with 32-bit wraparound."""
    hash_value = 23
    data = value.encode("utf-16-le")
    for index in range(0, len(data), 2):
        code_unit = data[index] | (data[index + 1] << 8)
        hash_value = (hash_value * 31 + code_unit) & 0xFFFFFFFF
    if hash_value >= 0x80000000:
        hash_value -= 0x100000000
    return abs(hash_value)


def quantity_scale(quantity: Decimal | None) -> Decimal:
    """Scale per-100 values by quantity; missing or zero quantity counts as 1."""
    if quantity is None or quantity <= 0:
        return Decimal(1)
    return max(quantity / Decimal(100), _MIN_QUANTITY_SCALE)


@dataclass(frozen=True)
class FallbackEstimator:
    """Deterministic calorie estimate derived from the ingredient name."""

    base_calories: int = 90
    spread: int = 120
    split: MacroSplit = FALLBACK_SPLIT

    def estimate(self, ingredient: IngredientInput) -> IngredientNutrition:
        """Synthesize nutrition for an ingredient without any external call."""
        base = Decimal(self.base_calories + stable_hash(ingredient.name) % self.spread)
        calories = base * quantity_scale(ingredient.quantity)
        protein, carbs, fat = self.split.to_grams(calories)
        return IngredientNutrition(
            name=ingredient.name,
            calories=round2(calories),
            protein_g=protein,
            carbs_g=carbs,
            fat_g=fat,
        )


@dataclass
class NutritionResolver:
    """Resolve per-ingredient nutrition, degrading to fallback estimates."""

    source: NutritionSource
    app_log: AppLogService
    estimator: FallbackEstimator
    fallback_on_error: bool = True
    scale_live_results: bool = True
    source_label: str = "Nutrition"

    async def resolve(
        self, ingredients: list[IngredientInput], calorie_target: Decimal = Decimal(0)
    ) -> tuple[NutritionSummary, list[IngredientNutrition]]:
        """Return the aggregate summary and per-ingredient nutrition.

        Lookups run concurrently; results keep the input order. A hard lookup
        failure cancels the remaining lookups. Cancellation propagates to the
        caller.
        """
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self._resolve_one(item)) for item in ingredients
                ]
        except ExceptionGroup as errors:
            lookup_errors = errors.subgroup(NutritionLookupError)
            if lookup_errors is None:
                raise
            raise lookup_errors.exceptions[0] from None
        items = [task.result() for task in tasks]
        summary = NutritionSummary.from_items(items)
        if (not items or summary.total_calories <= 0) and calorie_target > 0:
            summary = _summary_from_target(calorie_target)
            if not items:
                items.append(
                    IngredientNutrition(
                        name=AUTO_BALANCED_NAME,
                        calories=summary.total_calories,
                        protein_g=summary.total_protein_g,
                        carbs_g=summary.total_carbs_g,
                        fat_g=summary.total_fat_g,
                    )
                )
        return summary, items

    async def _resolve_one(self, ingredient: IngredientInput) -> IngredientNutrition:
        try:
            outcome = await self.source.lookup(ingredient)
        except Exception as exc:
            _logger.warning(
                "Unexpected nutrition lookup error for %s",
                ingredient.name,
                exc_info=True,
            )
            outcome = Failure(f"unexpected error: {exc}")

        if isinstance(outcome, Failure):
            if not self.fallback_on_error:
                raise NutritionLookupError(
                    f"Nutrition lookup failed for {ingredient.name}: {outcome.reason}"
                )
            return self._fallback(ingredient, outcome.reason)

        facts = outcome.value[0] if outcome.value else None
        if facts is None:
            return self._fallback(ingredient, "no candidates returned")
        if not facts.is_plausible():
            return self._fallback(ingredient, "macros were zero or negative")
        return self._from_facts(ingredient, facts)

    def _from_facts(
        self, ingredient: IngredientInput, facts: NutritionFacts
    ) -> IngredientNutrition:
        scale = Decimal(1)
        if self.scale_live_results:
            scale = quantity_scale(ingredient.quantity)
        return IngredientNutrition(
            name=ingredient.name,
            calories=round2(facts.calories * scale),
            protein_g=round2(facts.protein_g * scale),
            carbs_g=round2(facts.carbs_g * scale),
            fat_g=round2(facts.fat_g * scale),
        )

    def _fallback(
        self, ingredient: IngredientInput, reason: str
    ) -> IngredientNutrition:
        self.app_log.warning(
            f"{self.source_label} lookup fallback for ingredient "
            f"{ingredient.name}: {reason}"
        )
        return self.estimator.estimate(ingredient)


def _summary_from_target(calorie_target: Decimal) -> NutritionSummary:
    protein, carbs, fat = TARGET_SPLIT.to_grams(calorie_target)
    return NutritionSummary(
        total_calories=round2(calorie_target),
        total_protein_g=protein,
        total_carbs_g=carbs,
        total_fat_g=fat,
    )
