"""OpenAI Responses API client for nutrition estimates."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_watcher.services.estimation import NutritionTextClient


@dataclass
class OpenAITextClient(NutritionTextClient):
    """Text-generation client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    max_output_tokens: int = 200

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def complete(self, *, instructions: str, prompt: str) -> str:
        """Return the model's raw text answer, which may be empty."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "instructions": instructions,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "max_output_tokens": self.max_output_tokens,
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
