"""Nutritionix natural-language nutrients client."""

from dataclasses import dataclass, field
from decimal import Decimal

import httpx

from smart_chef.domain.meals import IngredientInput
from smart_chef.domain.nutrition import NutritionFacts, parse_decimal
from smart_chef.domain.results import Failure, Result, Success
from smart_chef.services.nutrition import NutritionSource


@dataclass
class HttpxNutritionixClient(NutritionSource):
    """HTTPX-backed Nutritionix client."""

    base_url: str
    http_client: httpx.AsyncClient
    endpoint: str = "natural/nutrients"
    headers: dict[str, str] = field(default_factory=dict)
    timeout_seconds: float = 15

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        base_url: str,
        endpoint: str,
        app_id_header: str,
        app_id: str | None,
        api_key_header: str,
        api_key: str | None,
        bearer_token: str | None,
        timeout_seconds: float,
    ) -> "HttpxNutritionixClient":
        """Create a client with credential headers and a managed httpx session."""
        headers: dict[str, str] = {}
        if app_id:
            headers[app_id_header] = app_id
        if api_key:
            headers[api_key_header] = api_key
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            endpoint=endpoint.lstrip("/"),
            headers=headers,
            timeout_seconds=timeout_seconds,
        )

    async def lookup(self, ingredient: IngredientInput) -> Result[list[NutritionFacts]]:
        """Query nutrients for a natural-language ingredient description."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/{self.endpoint}",
                json={"query": build_query(ingredient)},
                headers=self.headers,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return Failure(f"{type(exc).__name__}: {exc}")

        if not isinstance(payload, dict):
            return Failure("unexpected payload shape")
        foods = payload.get("foods") or []
        if not isinstance(foods, list):
            return Failure("foods is not a list")
        try:
            return Success([_food_facts(food) for food in foods])
        except (AttributeError, ValueError) as exc:
            return Failure(f"malformed food record: {exc}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def build_query(ingredient: IngredientInput) -> str:
    """Describe the ingredient as "<quantity> <unit> <name>"."""
    quantity = ingredient.quantity
    if quantity is None or quantity <= 0:
        quantity = Decimal(1)
    unit = ingredient.unit or "unit"
    return f"{quantity} {unit} {ingredient.name}"


def _food_facts(food: dict[str, object]) -> NutritionFacts:
    return NutritionFacts(
        calories=parse_decimal(food.get("nf_calories")),
        protein_g=parse_decimal(food.get("nf_protein")),
        carbs_g=parse_decimal(food.get("nf_total_carbohydrate")),
        fat_g=parse_decimal(food.get("nf_total_fat")),
    )
