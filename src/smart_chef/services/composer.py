"""Compose generated meals from nutrition data and optional AI ideas."""

import random
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from smart_chef.domain.meals import (
    AiMealIdea,
    GeneratedMeal,
    IngredientInput,
    IngredientNutrition,
    MealIngredient,
    MealInstruction,
    MealRequest,
    NutritionSummary,
)
from smart_chef.domain.nutrition import format_amount, round2


class MealTemplate(Protocol):
    """Deterministic wording for a generation mode."""

    def title(self, ingredients: list[IngredientInput]) -> str:
        """Return the meal title."""

    def description(
        self, calorie_target: Decimal, nutrition: NutritionSummary
    ) -> str:
        """Return the meal description."""

    def instructions(self, ingredients: list[IngredientInput]) -> list[str]:
        """Return the cooking steps."""


def calorie_alignment(
    total_calories: Decimal, calorie_target: Decimal, tolerance: Decimal
) -> str:
    """Bucket calories relative to the target: "above", "below" or "aligned"."""
    diff = total_calories - calorie_target
    if diff > tolerance:
        return "above"
    if diff < -tolerance:
        return "below"
    return "aligned"


@dataclass
class SimpleMealTemplate(MealTemplate):
    """Approachable wording with a randomly chosen title style."""

    rng: random.Random = field(default_factory=random.Random)
    tolerance: Decimal = Decimal(50)
    styles: tuple[str, ...] = ("Power Bowl", "Balanced Plate", "Chef's Special")

    def title(self, ingredients: list[IngredientInput]) -> str:
        return f"{ingredients[0].name} {self.rng.choice(self.styles)}"

    def description(
        self, calorie_target: Decimal, nutrition: NutritionSummary
    ) -> str:
        text = "A wholesome meal tailored to your inputs"
        if calorie_target <= 0:
            return f"{text}."
        direction = {
            "above": "slightly above",
            "below": "slightly below",
            "aligned": "aligned with",
        }[calorie_alignment(nutrition.total_calories, calorie_target, self.tolerance)]
        return f"{text} and {direction} your calorie target."

    def instructions(self, ingredients: list[IngredientInput]) -> list[str]:
        steps = [
            "Prep all ingredients by washing, chopping, or measuring as needed.",
            "Heat a pan over medium heat and start with the base ingredient: "
            f"{ingredients[0].name}.",
            "Combine remaining ingredients gradually, adjusting seasoning to taste.",
            "Simmer until flavors meld and textures reach your preference.",
            "Serve warm and garnish with fresh herbs or a squeeze of citrus.",
        ]
        if len(ingredients) > 3:
            steps.insert(2, "Layer in supporting ingredients to build complexity.")
        return steps


@dataclass
class ChefMealTemplate(MealTemplate):
    """Refined wording with a title suffix chosen by ingredient count."""

    tolerance: Decimal = Decimal(75)

    def title(self, ingredients: list[IngredientInput]) -> str:
        count = len(ingredients)
        if count <= 2:
            suffix = "Gourmet Plate"
        elif count <= 4:
            suffix = "Chef Crafted Bowl"
        else:
            suffix = "Signature Tasting"
        return f"{ingredients[0].name} {suffix}"

    def description(
        self, calorie_target: Decimal, nutrition: NutritionSummary
    ) -> str:
        text = "Smart Chef curated meal balancing your inputs with nutrition insights"
        if calorie_target <= 0:
            return f"{text}."
        direction = {
            "above": "with extra energy for your goal",
            "below": "with a lighter finish than requested",
            "aligned": "aligned closely with your calorie target",
        }[calorie_alignment(nutrition.total_calories, calorie_target, self.tolerance)]
        return f"{text}, {direction}."

    def instructions(self, ingredients: list[IngredientInput]) -> list[str]:
        return [
            "Prep all fresh ingredients carefully, cutting evenly for consistent "
            "cooking.",
            f"Sear or cook the hero ingredient ({ingredients[0].name}) to build "
            "flavor.",
            "Layer supporting ingredients, starting with aromatics and finishing "
            "with delicate items.",
            "Deglaze or moisten the pan as needed, tasting and adjusting seasoning.",
            "Plate with intention, balancing textures and garnishing for color.",
        ]


@dataclass
class MealComposer:
    """Builds the final meal and overlays any AI idea."""

    template: MealTemplate

    def compose(
        self,
        request: MealRequest,
        nutrition: NutritionSummary,
        ingredient_nutrition: list[IngredientNutrition],
        idea: AiMealIdea | None = None,
    ) -> GeneratedMeal:
        """Return the generated meal for a normalized request."""
        ingredients = request.ingredients
        meal = GeneratedMeal(
            title=self.template.title(ingredients),
            description=self.template.description(request.calorie_target, nutrition),
            input_summary=build_input_summary(ingredients),
            nutrition=nutrition,
            ingredients=build_meal_ingredients(ingredients, ingredient_nutrition),
            instructions=number_steps(self.template.instructions(ingredients)),
        )
        if idea is not None:
            apply_ai_idea(meal, idea)
        return meal


def build_input_summary(ingredients: list[IngredientInput]) -> str:
    """Join ingredients as "<quantity> <unit> <name>", skipping missing parts."""
    parts: list[str] = []
    for ingredient in ingredients:
        if ingredient.quantity is None:
            parts.append(ingredient.name)
            continue
        quantity = format_amount(ingredient.quantity)
        if ingredient.unit:
            parts.append(f"{quantity} {ingredient.unit} {ingredient.name}")
        else:
            parts.append(f"{quantity} {ingredient.name}")
    return ", ".join(parts)


def build_meal_ingredients(
    ingredients: list[IngredientInput],
    ingredient_nutrition: list[IngredientNutrition],
) -> list[MealIngredient]:
    """Pair each input ingredient with its resolved calories by position."""
    meal_ingredients: list[MealIngredient] = []
    for index, ingredient in enumerate(ingredients):
        calories = Decimal(0)
        if index < len(ingredient_nutrition):
            calories = ingredient_nutrition[index].calories
        meal_ingredients.append(
            MealIngredient(
                name=ingredient.name,
                amount=ingredient.quantity,
                unit=ingredient.unit,
                calories=round2(calories),
            )
        )
    return meal_ingredients


def number_steps(steps: list[str]) -> list[MealInstruction]:
    """Number non-blank steps sequentially from 1."""
    cleaned = [step.strip() for step in steps if step and step.strip()]
    return [
        MealInstruction(step_number=index, text=text)
        for index, text in enumerate(cleaned, start=1)
    ]


def apply_ai_idea(meal: GeneratedMeal, idea: AiMealIdea) -> None:
    """Overlay non-empty AI fields onto the deterministic meal."""
    if idea.title.strip():
        meal.title = idea.title.strip()
    if idea.description.strip():
        meal.description = idea.description.strip()

    steps = number_steps(idea.instructions)
    if steps:
        meal.instructions = steps

    ai_ingredients = [
        MealIngredient(
            name=ingredient.name.strip(),
            amount=ingredient.amount,
            unit=ingredient.unit,
            calories=None,
        )
        for ingredient in idea.ingredients
        if ingredient.name.strip()
    ]
    if ai_ingredients:
        meal.ingredients = ai_ingredients
