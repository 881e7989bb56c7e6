"""DummyJSON recipe search used as the demo nutrition source."""

from dataclasses import dataclass

import httpx

from smart_chef.domain.meals import IngredientInput
from smart_chef.domain.nutrition import NutritionFacts, parse_decimal
from smart_chef.domain.results import Failure, Result, Success
from smart_chef.services.nutrition import NutritionSource


@dataclass
class HttpxDummyJsonClient(NutritionSource):
    """HTTPX-backed DummyJSON recipe lookup."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, base_url: str, timeout_seconds: float) -> "HttpxDummyJsonClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def lookup(self, ingredient: IngredientInput) -> Result[list[NutritionFacts]]:
        """Search recipes by ingredient name and return the first match's macros."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/recipes/search",
                params={"q": ingredient.name, "limit": 1},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return Failure(f"{type(exc).__name__}: {exc}")

        if not isinstance(payload, dict):
            return Failure("unexpected payload shape")
        recipes = payload.get("recipes") or []
        if not isinstance(recipes, list):
            return Failure("recipes is not a list")
        try:
            return Success([_recipe_facts(recipe) for recipe in recipes[:1]])
        except (AttributeError, ValueError) as exc:
            return Failure(f"malformed recipe: {exc}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _recipe_facts(recipe: dict[str, object]) -> NutritionFacts:
    calories = recipe.get("calories")
    if calories is None:
        calories = recipe.get("caloriesPerServing")
    return NutritionFacts(
        calories=parse_decimal(calories),
        protein_g=parse_decimal(recipe.get("protein")),
        carbs_g=parse_decimal(recipe.get("carbohydrates")),
        fat_g=parse_decimal(recipe.get("fat")),
    )
