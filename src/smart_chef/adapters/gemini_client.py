"""Vertex AI Gemini generateContent client."""

from dataclasses import dataclass

import httpx

from smart_chef.domain.results import Failure, Result, Success
from smart_chef.services.ai_ideas import AiTextClient, AiTextReply


@dataclass
class HttpxGeminiClient(AiTextClient):
    """HTTPX-backed Gemini client for the Vertex AI REST API."""

    base_url: str
    project_id: str
    location: str
    model: str
    http_client: httpx.AsyncClient
    access_token: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 15

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        base_url: str,
        project_id: str,
        location: str,
        model: str,
        access_token: str | None,
        api_key: str | None,
        timeout_seconds: float,
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            project_id=project_id,
            location=location,
            model=model,
            http_client=httpx.AsyncClient(),
            access_token=access_token,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
        )

    @property
    def model_path(self) -> str:
        """Fully qualified publisher model path."""
        return (
            f"projects/{self.project_id}/locations/{self.location}"
            f"/publishers/google/models/{self.model}"
        )

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> Result[AiTextReply]:
        """Call generateContent with a single user-role prompt."""
        headers: dict[str, str] = {}
        params: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        elif self.api_key:
            params["key"] = self.api_key

        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
                "responseMimeType": "application/json",
            },
        }
        try:
            response = await self.http_client.post(
                f"{self.base_url}/{self.model_path}:generateContent",
                json=body,
                headers=headers,
                params=params,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            return Failure(f"Vertex AI returned {exc.response.status_code}")
        except (httpx.HTTPError, ValueError) as exc:
            return Failure(f"{type(exc).__name__}: {exc}")

        if not isinstance(payload, dict):
            return Failure("unexpected payload shape")
        candidates = payload.get("candidates") or []
        if not isinstance(candidates, list):
            return Failure("candidates is not a list")
        return Success(AiTextReply(candidates=[_first_text(c) for c in candidates]))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first_text(candidate: object) -> str:
    """Return the first non-blank text part of a candidate."""
    if not isinstance(candidate, dict):
        return ""
    content = candidate.get("content")
    if not isinstance(content, dict):
        return ""
    for part in content.get("parts") or []:
        text = part.get("text") if isinstance(part, dict) else None
        if isinstance(text, str) and text.strip():
            return text
    return ""
