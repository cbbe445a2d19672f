"""Request shape used by the bundled workflow steps."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"] = "user"
    content: str


class ChatRequest(BaseModel):
    """A single external text-generation call.

    Unset optional fields are dropped when the request is canonicalized,
    so ``ChatRequest(model="m", messages=[...])`` and the same request with
    ``temperature=None`` share one cache entry.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[Message]
    instructions: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None


def response_text(response: Any) -> str:
    """Extract the ``output`` text of a backend response."""
    if not isinstance(response, dict) or not isinstance(response.get("output"), str):
        raise ValueError(f"Response has no text output: {response!r}")
    return response["output"]
