"""OpenAI Responses API client for meal idea text."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from smart_chef.domain.results import Failure, Result, Success
from smart_chef.services.ai_ideas import AiTextClient, AiTextReply


@dataclass
class OpenAITextClient(AiTextClient):
    """Text client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout_seconds: float
    ) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds),
            model=model,
        )

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> Result[AiTextReply]:
        """Call OpenAI Responses API requesting a JSON object.

        Temperature is not forwarded; reasoning models reject it.
        """
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [{"role": "user", "content": prompt}],
            "max_output_tokens": max_output_tokens,
            "text": {"format": {"type": "json_object"}},
            "store": False,
        }
        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            return Failure(f"{type(exc).__name__}: {exc}")

        output_text = response.output_text
        if not output_text or not output_text.strip():
            return Success(AiTextReply(candidates=[]))
        return Success(AiTextReply(candidates=[output_text]))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
