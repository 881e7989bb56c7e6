"""Tests for HTTP-based adapters."""

import asyncio
import json
from decimal import Decimal

import httpx
from openai import APIConnectionError

from smart_chef.adapters.dummyjson_client import HttpxDummyJsonClient
from smart_chef.adapters.gemini_client import HttpxGeminiClient
from smart_chef.adapters.nutritionix_client import HttpxNutritionixClient, build_query
from smart_chef.adapters.openai_text_client import OpenAITextClient
from smart_chef.domain.meals import IngredientInput
from smart_chef.domain.nutrition import NutritionFacts
from smart_chef.domain.results import Failure, Success
from smart_chef.services.ai_ideas import AiTextReply


class _FakeResponses:
    def __init__(self, output_text: str = "", error: Exception | None = None) -> None:
        self.output_text = output_text
        self.error = error
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.error is not None:
            raise self.error
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, responses: _FakeResponses) -> None:
        self.responses = responses


def _mock_client(handler) -> httpx.AsyncClient:  # type: ignore[no-untyped-def]
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_dummyjson_client_reads_first_recipe() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "recipes": [
                    {
                        "name": "Chicken Alfredo",
                        "caloriesPerServing": 500,
                        "protein": "32.5",
                        "carbohydrates": 40,
                        "fat": None,
                    },
                    {"name": "Ignored", "caloriesPerServing": 1},
                ]
            },
        )

    client = HttpxDummyJsonClient(
        base_url="https://dummyjson.test", http_client=_mock_client(handler)
    )

    result = asyncio.run(client.lookup(IngredientInput(name="Chicken breast")))

    assert result == Success(
        [
            NutritionFacts(
                calories=Decimal(500),
                protein_g=Decimal("32.5"),
                carbs_g=Decimal(40),
                fat_g=Decimal(0),
            )
        ]
    )
    assert seen[0].url.path == "/recipes/search"
    assert seen[0].url.params["q"] == "Chicken breast"
    assert seen[0].url.params["limit"] == "1"


def test_dummyjson_client_handles_empty_and_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        query = request.url.params["q"]
        if query == "Nothing":
            return httpx.Response(200, json={"recipes": [], "total": 0})
        if query == "Broken":
            return httpx.Response(200, content=b"<html>")
        return httpx.Response(500, json={"message": "boom"})

    client = HttpxDummyJsonClient(
        base_url="https://dummyjson.test", http_client=_mock_client(handler)
    )

    assert asyncio.run(client.lookup(IngredientInput(name="Nothing"))) == Success([])
    assert isinstance(
        asyncio.run(client.lookup(IngredientInput(name="Broken"))), Failure
    )
    assert isinstance(asyncio.run(client.lookup(IngredientInput(name="Down"))), Failure)


def test_nutritionix_build_query() -> None:
    chicken = IngredientInput(name="Chicken breast", quantity=Decimal(150), unit="g")

    assert build_query(chicken) == "150 g Chicken breast"
    assert build_query(IngredientInput(name="Salt")) == "1 unit Salt"
    assert build_query(IngredientInput(name="Egg", quantity=Decimal(0))) == "1 unit Egg"


def test_nutritionix_client_posts_query_with_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "foods": [
                    {
                        "food_name": "chicken breast",
                        "nf_calories": 247.5,
                        "nf_protein": 46.5,
                        "nf_total_carbohydrate": 0,
                        "nf_total_fat": 5.4,
                    }
                ]
            },
        )

    client = HttpxNutritionixClient.create(
        base_url="https://nutritionix.test/v2/",
        endpoint="/natural/nutrients",
        app_id_header="x-app-id",
        app_id="app",
        api_key_header="x-app-key",
        api_key="secret",
        bearer_token=None,
        timeout_seconds=5,
    )
    client.http_client = _mock_client(handler)

    result = asyncio.run(
        client.lookup(
            IngredientInput(name="Chicken breast", quantity=Decimal(150), unit="g")
        )
    )

    assert isinstance(result, Success)
    assert result.value[0].calories == Decimal("247.5")
    assert result.value[0].fat_g == Decimal("5.4")
    request = seen[0]
    assert str(request.url) == "https://nutritionix.test/v2/natural/nutrients"
    assert request.headers["x-app-id"] == "app"
    assert request.headers["x-app-key"] == "secret"
    assert "authorization" not in request.headers
    assert json.loads(request.content) == {"query": "150 g Chicken breast"}


def test_nutritionix_client_reports_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "unauthorized"})

    client = HttpxNutritionixClient(
        base_url="https://nutritionix.test/v2",
        http_client=_mock_client(handler),
        headers={"Authorization": "Bearer token"},
    )

    result = asyncio.run(client.lookup(IngredientInput(name="Egg")))

    assert isinstance(result, Failure)
    assert "401" in result.reason


def _gemini(  # type: ignore[no-untyped-def]
    handler, **kwargs: str
) -> HttpxGeminiClient:
    return HttpxGeminiClient(
        base_url="https://us-central1-aiplatform.test/v1",
        project_id="demo-project",
        location="us-central1",
        model="gemini-2.5-pro",
        http_client=_mock_client(handler),
        **kwargs,  # type: ignore[arg-type]
    )


def test_gemini_client_sends_prompt_and_reads_candidates() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "candidates": [
                    {
                        "content": {
                            "parts": [{"text": "  "}, {"text": '{"title": "A"}'}]
                        }
                    },
                    {"content": {"parts": []}},
                ]
            },
        )

    client = _gemini(handler, access_token="token")

    result = asyncio.run(
        client.generate(prompt="Make dinner", temperature=0.2, max_output_tokens=512)
    )

    assert result == Success(AiTextReply(candidates=['{"title": "A"}', ""]))
    request = seen[0]
    assert request.url.path == (
        "/v1/projects/demo-project/locations/us-central1"
        "/publishers/google/models/gemini-2.5-pro:generateContent"
    )
    assert request.headers["authorization"] == "Bearer token"
    body = json.loads(request.content)
    assert body["contents"] == [{"role": "user", "parts": [{"text": "Make dinner"}]}]
    assert body["generationConfig"] == {
        "temperature": 0.2,
        "maxOutputTokens": 512,
        "responseMimeType": "application/json",
    }


def test_gemini_client_uses_api_key_without_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = _gemini(handler, api_key="key-123")

    result = asyncio.run(
        client.generate(prompt="Hi", temperature=0.0, max_output_tokens=64)
    )

    assert result == Success(AiTextReply(candidates=[]))
    assert seen[0].url.params["key"] == "key-123"
    assert "authorization" not in seen[0].headers


def test_gemini_client_reports_status_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    client = _gemini(handler, access_token="token")

    result = asyncio.run(
        client.generate(prompt="Hi", temperature=0.0, max_output_tokens=64)
    )

    assert result == Failure("Vertex AI returned 503")


def test_openai_text_client_requests_json_output() -> None:
    responses = _FakeResponses(output_text='{"title": "Omelette"}')
    client = OpenAITextClient(
        client=_FakeOpenAI(responses),  # type: ignore[arg-type]
        model="gpt-5.2",
    )

    result = asyncio.run(
        client.generate(prompt="Eggs please", temperature=0.7, max_output_tokens=256)
    )

    assert result == Success(AiTextReply(candidates=['{"title": "Omelette"}']))
    assert responses.last_payload is not None
    assert responses.last_payload["model"] == "gpt-5.2"
    assert responses.last_payload["max_output_tokens"] == 256
    assert responses.last_payload["text"] == {"format": {"type": "json_object"}}
    assert "temperature" not in responses.last_payload


def test_openai_text_client_handles_empty_output_and_errors() -> None:
    empty = OpenAITextClient(
        client=_FakeOpenAI(_FakeResponses(output_text="  ")),  # type: ignore[arg-type]
        model="gpt-5.2",
    )
    error = APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.test/v1/responses")
    )
    failing = OpenAITextClient(
        client=_FakeOpenAI(_FakeResponses(error=error)),  # type: ignore[arg-type]
        model="gpt-5.2",
    )

    assert asyncio.run(
        empty.generate(prompt="Hi", temperature=0.0, max_output_tokens=64)
    ) == Success(AiTextReply(candidates=[]))
    assert isinstance(
        asyncio.run(
            failing.generate(prompt="Hi", temperature=0.0, max_output_tokens=64)
        ),
        Failure,
    )
