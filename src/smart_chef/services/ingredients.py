"""Ingredient list normalization."""

from smart_chef.domain.meals import IngredientInput


class IngredientValidationError(ValueError):
    """Raised when no usable ingredient remains after normalization."""


def normalize_ingredients(
    ingredients: list[IngredientInput],
) -> tuple[list[IngredientInput], bool]:
    """Trim names and units, dropping entries without a name.

    Returns the cleaned list and whether at least one ingredient survived.
    Quantities pass through unchanged.
    """
    normalized: list[IngredientInput] = []
    for ingredient in ingredients:
        name = (ingredient.name or "").strip()
        if not name:
            continue
        unit = (ingredient.unit or "").strip() or None
        normalized.append(
            IngredientInput(name=name, quantity=ingredient.quantity, unit=unit)
        )
    return normalized, bool(normalized)


def require_ingredients(ingredients: list[IngredientInput]) -> list[IngredientInput]:
    """Normalize ingredients, raising when none remain."""
    normalized, has_any = normalize_ingredients(ingredients)
    if not has_any:
        raise IngredientValidationError("Please provide at least one ingredient.")
    return normalized
