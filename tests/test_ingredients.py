"""Tests for ingredient normalization."""

from decimal import Decimal

import pytest

from smart_chef.domain.meals import IngredientInput
from smart_chef.services.ingredients import (
    IngredientValidationError,
    normalize_ingredients,
    require_ingredients,
)


def test_normalize_trims_and_drops_blank_names() -> None:
    raw = [
        IngredientInput(name="  Chicken breast ", quantity=Decimal(150), unit=" g "),
        IngredientInput(name="   "),
        IngredientInput(name="Rice", unit="   "),
    ]

    normalized, has_any = normalize_ingredients(raw)

    assert has_any
    assert normalized == [
        IngredientInput(name="Chicken breast", quantity=Decimal(150), unit="g"),
        IngredientInput(name="Rice", quantity=None, unit=None),
    ]


def test_normalize_keeps_quantity_unchanged() -> None:
    normalized, _ = normalize_ingredients(
        [IngredientInput(name="Oats", quantity=Decimal("0"))]
    )

    assert normalized[0].quantity == Decimal("0")


def test_normalize_reports_no_survivors() -> None:
    normalized, has_any = normalize_ingredients([IngredientInput(name=" ")])

    assert normalized == []
    assert not has_any


def test_require_ingredients_raises_for_empty_list() -> None:
    with pytest.raises(IngredientValidationError):
        require_ingredients([])
