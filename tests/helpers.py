"""Test helpers shared across modules."""

import asyncio
from typing import Callable

from showdown.lib.llm import LLMResponse
from showdown.lib.models import TokenUsage


def make_response(content: str, model: str = "gemini-2.5-flash") -> LLMResponse:
    """Build an LLMResponse as the client would return it."""
    return LLMResponse(
        content=content,
        token_usage=TokenUsage(input_tokens=40, output_tokens=8, model=model),
        model=model,
        finish_reason="STOP",
    )


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the loop until predicate() holds."""

    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout)
