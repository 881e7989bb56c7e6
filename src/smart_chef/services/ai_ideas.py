"""Meal idea generation using a generative text backend."""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Protocol, TypeVar

from smart_chef.domain.meals import (
    AiMealIdea,
    AiMealIngredient,
    IngredientInput,
    NutritionSummary,
)
from smart_chef.domain.nutrition import format_amount
from smart_chef.domain.results import Failure, Result, Success
from smart_chef.services.app_log import AppLogService

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_FENCE = "```"
_LANGUAGE_TAG = re.compile(r"[A-Za-z0-9_+.-]*")
_SNIPPET_LIMIT = 500

PROMPT_TEMPLATE = """Respond with only a valid JSON object and no surrounding prose.

Use exactly this shape:
{{
  "title": "short appetizing meal name",
  "description": "one or two sentences describing the meal",
  "ingredients": [
    {{"name": "Chicken breast", "amount": 150, "unit": "g"}}
  ],
  "instructions": [
    "First cooking step.",
    "Second cooking step."
  ]
}}

Build a single meal around the user's ingredients. You may add a few
complementary ingredients so the meal feels complete. Keep the meal close
to the target calories and the approximate macros below.

USER INPUT:
Ingredients: {ingredients}
Target calories: {calorie_target}
Approximate macros: {macros}"""


@dataclass(frozen=True)
class AiTextReply:
    """Text returned by the backend, one entry per candidate."""

    candidates: list[str]


class AiTextClient(Protocol):
    """Interface for generative text backends."""

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> Result[AiTextReply]:
        """Send a single user prompt and return candidate texts."""


@dataclass
class AiIdeaGenerator:
    """Builds prompts, calls the backend and parses meal ideas.

    Every failure is reported to the application log and turned into None.
    """

    client: AiTextClient | None
    app_log: AppLogService
    enabled: bool = True
    temperature: float = 0.0
    max_output_tokens: int = 4096

    async def generate(
        self,
        ingredients: list[IngredientInput],
        nutrition: NutritionSummary,
        calorie_target: Decimal = Decimal(0),
    ) -> AiMealIdea | None:
        """Return an AI meal idea, or None when unavailable."""
        if not self.enabled:
            return None
        if self.client is None:
            self.app_log.warning("AI request skipped: backend credentials missing.")
            return None

        self.app_log.information(
            f"AI request started for {len(ingredients)} ingredients."
        )
        prompt = build_prompt(ingredients, nutrition, calorie_target)
        try:
            outcome = await self.client.generate(
                prompt=prompt,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            )
        except Exception as exc:
            _logger.warning("AI client raised unexpectedly", exc_info=True)
            outcome = Failure(f"{type(exc).__name__}: {exc}")

        if isinstance(outcome, Failure):
            self.app_log.warning(f"AI request failed: {outcome.reason}")
            return None
        if not outcome.value.candidates:
            self.app_log.warning("AI backend returned no candidates.")
            return None

        raw_text = outcome.value.candidates[0]
        parsed = parse_meal_idea(raw_text)
        if isinstance(parsed, Failure):
            snippet = (raw_text.strip() or "(empty)")[:_SNIPPET_LIMIT]
            self.app_log.warning(
                f"AI payload could not be parsed ({parsed.reason}). Payload: {snippet}"
            )
            return None

        self.app_log.information(f"AI meal idea generated: {parsed.value.title}")
        return parsed.value


def build_prompt(
    ingredients: list[IngredientInput],
    nutrition: NutritionSummary,
    calorie_target: Decimal,
) -> str:
    """Render the meal idea prompt."""
    described = ", ".join(_describe(ingredient) for ingredient in ingredients)
    target = f"{calorie_target:.0f}" if calorie_target > 0 else "auto"
    macros = (
        f"calories={format_amount(nutrition.total_calories)}, "
        f"protein={format_amount(nutrition.total_protein_g)}g, "
        f"carbs={format_amount(nutrition.total_carbs_g)}g, "
        f"fat={format_amount(nutrition.total_fat_g)}g"
    )
    return PROMPT_TEMPLATE.format(
        ingredients=described, calorie_target=target, macros=macros
    )


def _describe(ingredient: IngredientInput) -> str:
    quantity = (
        format_amount(ingredient.quantity) if ingredient.quantity is not None else ""
    )
    return " ".join(
        part for part in (ingredient.name, quantity, ingredient.unit or "") if part
    )


def clean_model_response(text: str) -> str:
    """Strip a surrounding Markdown code fence from model output."""
    trimmed = text.strip()
    if not trimmed.startswith(_FENCE):
        return trimmed

    trimmed = trimmed[len(_FENCE) :]
    first_line, newline, rest = trimmed.partition("\n")
    if newline and _LANGUAGE_TAG.fullmatch(first_line.strip()):
        trimmed = rest
    closing = trimmed.rfind(_FENCE)
    if closing >= 0:
        trimmed = trimmed[:closing]
    return trimmed.strip()


def parse_meal_idea(text: str) -> Result[AiMealIdea]:
    """Parse model output into a meal idea."""
    if not text or not text.strip():
        return Failure("empty payload")
    cleaned = clean_model_response(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        return Failure(f"invalid JSON: {exc.msg}")
    except RecursionError:
        return Failure("invalid JSON: nesting too deep")
    if not isinstance(payload, dict):
        return Failure("payload is not a JSON object")

    raw_ingredients = payload.get("ingredients")
    ingredients: list[AiMealIngredient] = []
    if isinstance(raw_ingredients, list):
        for element in raw_ingredients:
            ingredient = _parse_ingredient_safely(element)
            if ingredient is not None:
                ingredients.append(ingredient)

    return Success(
        AiMealIdea(
            title=_text_field(payload, "title"),
            description=_text_field(payload, "description"),
            instructions=_instructions(payload.get("instructions")),
            ingredients=ingredients,
        )
    )


def _text_field(payload: dict[str, object], key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def _instructions(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [step.strip() for step in value if isinstance(step, str) and step.strip()]


def _parse_ingredient_safely(element: object) -> AiMealIngredient | None:
    try:
        return parse_ai_ingredient(element)
    except (AttributeError, TypeError, ValueError):
        _logger.debug("Dropping malformed AI ingredient: %r", element)
        return None


def parse_ai_ingredient(element: object) -> AiMealIngredient | None:
    """Parse one AI ingredient entry; None when the name is missing."""
    if not isinstance(element, dict):
        return None
    name = element.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    amount = _first_success(AMOUNT_STRATEGIES, element)
    unit = _first_success(UNIT_STRATEGIES, element)
    if amount is None and unit is not None:
        derived, remainder = split_combined_quantity(unit)
        if derived is not None:
            amount, unit = derived, remainder
    return AiMealIngredient(name=name.strip(), amount=amount, unit=unit)


def _decimal_field(key: str) -> Callable[[dict[str, object]], Decimal | None]:
    def extract(element: dict[str, object]) -> Decimal | None:
        return read_decimal(element.get(key))

    return extract


def _text_field_strategy(key: str) -> Callable[[dict[str, object]], str | None]:
    def extract(element: dict[str, object]) -> str | None:
        value = element.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    return extract


AMOUNT_STRATEGIES = (_decimal_field("amount"), _decimal_field("quantity"))
UNIT_STRATEGIES = (
    _text_field_strategy("unit"),
    _text_field_strategy("measure"),
    _text_field_strategy("amountText"),
)


def _first_success(
    strategies: tuple[Callable[[dict[str, object]], _T | None], ...],
    element: dict[str, object],
) -> _T | None:
    for strategy in strategies:
        value = strategy(element)
        if value is not None:
            return value
    return None


def read_decimal(value: object) -> Decimal | None:
    """Read a JSON number or numeric string; None for anything else."""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def split_combined_quantity(text: str) -> tuple[Decimal | None, str | None]:
    """Split a leading number from a unit string, e.g. "150g" -> (150, "g")."""
    trimmed = text.strip()
    if not trimmed:
        return None, None

    index = 0
    while index < len(trimmed) and _is_number_char(trimmed[index]):
        index += 1
    if index == 0:
        return None, trimmed

    value = read_decimal(trimmed[:index].replace(",", "."))
    if value is None:
        return None, trimmed
    remainder = trimmed[index:].strip()
    return value, remainder or None


def _is_number_char(char: str) -> bool:
    return char.isdigit() or char in ".,"
