"""Unified LLM client for Showdown.

Supports Gemini, Anthropic (Claude), OpenAI (GPT), and OpenRouter APIs.
Routes requests based on the model name.
"""

import asyncio
import logging
from typing import Any

import httpx
from anthropic import AsyncAnthropic
from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI
from pydantic import BaseModel

from showdown.config import ModelProvider, ModelType, Settings, get_settings
from showdown.lib.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMResponseParseError,
)
from showdown.lib.models import TokenUsage

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


# =============================================================================
# Response Models
# =============================================================================


class LLMResponse(BaseModel):
    """Unified response from LLM."""

    content: str
    token_usage: TokenUsage
    model: str
    finish_reason: str | None = None


def _classify_error(e: Exception) -> LLMError:
    """Map a provider SDK exception onto the LLM error hierarchy."""
    if isinstance(e, LLMError):
        return e
    error_msg = str(e).lower()
    code = getattr(e, "code", None) or getattr(e, "status_code", None)
    if code == 429 or "rate limit" in error_msg or "429" in error_msg:
        return LLMRateLimitError(str(e))
    if code in (401, 403) or "authentication" in error_msg or "401" in error_msg:
        return LLMAuthenticationError(str(e))
    return LLMConnectionError(str(e))


# =============================================================================
# LLM Client
# =============================================================================


class LLMClient:
    """
    Unified client for LLM APIs.

    Routes requests to Gemini, Anthropic, OpenAI, or OpenRouter based on the
    model name. Tracks token usage per caller tag.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._gemini_client: genai.Client | None = None
        self._anthropic_client: AsyncAnthropic | None = None
        self._openai_client: AsyncOpenAI | None = None
        self._http_client: httpx.AsyncClient | None = None

        # Token tracking per tag
        self._token_usage: dict[str, TokenUsage] = {}

    async def __aenter__(self) -> "LLMClient":
        """Async context manager entry."""
        await self._ensure_clients()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_clients(self) -> None:
        """Initialize clients if needed."""
        if self._gemini_client is None and self.settings.has_gemini_key:
            self._gemini_client = genai.Client(api_key=self.settings.gemini_api_key)

        if self._anthropic_client is None and self.settings.has_anthropic_key:
            self._anthropic_client = AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
            )

        if self._openai_client is None and self.settings.has_openai_key:
            self._openai_client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
            )

        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=5.0),
            )

    async def close(self) -> None:
        """Close all clients."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        if self._anthropic_client:
            await self._anthropic_client.close()
            self._anthropic_client = None
        if self._openai_client:
            await self._openai_client.close()
            self._openai_client = None
        self._gemini_client = None

    def _get_provider(self, model: str) -> ModelProvider:
        """Determine provider for a model."""
        return self.settings.get_model_provider(model)

    def _track_usage(self, tag: str, input_tokens: int, output_tokens: int) -> None:
        """Track cumulative token usage per tag."""
        if tag not in self._token_usage:
            self._token_usage[tag] = TokenUsage()
        self._token_usage[tag].input_tokens += input_tokens
        self._token_usage[tag].output_tokens += output_tokens

    def get_usage_summary(self) -> dict[str, dict[str, int]]:
        """Return token usage by tag for cost tracking."""
        return {
            tag: {"input": usage.input_tokens, "output": usage.output_tokens}
            for tag, usage in self._token_usage.items()
        }

    # =========================================================================
    # Gemini API
    # =========================================================================

    async def _complete_gemini(
        self,
        model: str,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
        tag: str | None = None,
    ) -> LLMResponse:
        """Complete using the Gemini API."""
        await self._ensure_clients()

        if not self._gemini_client:
            raise LLMAuthenticationError("Gemini API key not configured")

        # Gemini calls the assistant role "model"
        contents = [
            {
                "role": "model" if m.get("role") == "assistant" else "user",
                "parts": [{"text": m.get("content", "")}],
            }
            for m in messages
        ]
        # Flash models spend thinking tokens out of max_output_tokens
        thinking_config = None
        if "flash" in model:
            thinking_config = genai_types.ThinkingConfig(thinking_budget=0)

        config = genai_types.GenerateContentConfig(
            system_instruction=system,
            max_output_tokens=max_tokens,
            temperature=temperature,
            thinking_config=thinking_config,
        )

        try:
            response = await self._gemini_client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise _classify_error(e)

        content = (getattr(response, "text", None) or "").strip()

        # Reassemble from candidate parts when .text is empty
        if not content:
            text_parts: list[str] = []
            for cand in getattr(response, "candidates", None) or []:
                cand_content = getattr(cand, "content", None)
                for part in getattr(cand_content, "parts", None) or []:
                    part_text = getattr(part, "text", None)
                    if part_text:
                        text_parts.append(part_text)
            content = " ".join(text_parts).strip()

        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", 0) or 0
        output_tokens = getattr(usage, "candidates_token_count", 0) or 0

        if tag:
            self._track_usage(tag, input_tokens, output_tokens)

        finish_reason = None
        candidates = getattr(response, "candidates", None) or []
        if candidates and getattr(candidates[0], "finish_reason", None) is not None:
            finish_reason = str(candidates[0].finish_reason)

        return LLMResponse(
            content=content,
            token_usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                model=model,
            ),
            model=model,
            finish_reason=finish_reason,
        )

    # =========================================================================
    # Anthropic API
    # =========================================================================

    async def _complete_anthropic(
        self,
        model: str,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
        tag: str | None = None,
    ) -> LLMResponse:
        """Complete using Anthropic API."""
        await self._ensure_clients()

        if not self._anthropic_client:
            raise LLMAuthenticationError("Anthropic API key not configured")

        try:
            kwargs: dict[str, Any] = {
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
            if system:
                kwargs["system"] = system

            response = await self._anthropic_client.messages.create(**kwargs)
        except Exception as e:
            raise _classify_error(e)

        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens

        if tag:
            self._track_usage(tag, input_tokens, output_tokens)

        return LLMResponse(
            content=content,
            token_usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                model=model,
            ),
            model=model,
            finish_reason=response.stop_reason,
        )

    # =========================================================================
    # OpenAI API
    # =========================================================================

    async def _complete_openai(
        self,
        model: str,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
        tag: str | None = None,
    ) -> LLMResponse:
        """Complete using OpenAI API."""
        await self._ensure_clients()

        if not self._openai_client:
            raise LLMAuthenticationError("OpenAI API key not configured")

        all_messages = []
        if system:
            all_messages.append({"role": "system", "content": system})
        all_messages.extend(messages)

        try:
            response = await self._openai_client.chat.completions.create(
                model=model,
                messages=all_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            raise _classify_error(e)

        content = response.choices[0].message.content or ""
        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0

        if tag:
            self._track_usage(tag, input_tokens, output_tokens)

        return LLMResponse(
            content=content,
            token_usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                model=model,
            ),
            model=model,
            finish_reason=response.choices[0].finish_reason,
        )

    # =========================================================================
    # OpenRouter API
    # =========================================================================

    async def _complete_openrouter(
        self,
        model: str,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
        tag: str | None = None,
    ) -> LLMResponse:
        """Complete using OpenRouter API."""
        await self._ensure_clients()

        if not self.settings.has_openrouter_key:
            raise LLMAuthenticationError("OpenRouter API key not configured")

        all_messages = messages.copy()
        if system:
            all_messages.insert(0, {"role": "system", "content": system})

        payload = {
            "model": model,
            "messages": all_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            assert self._http_client is not None
            response = await self._http_client.post(
                OPENROUTER_URL,
                headers={
                    "Authorization": f"Bearer {self.settings.openrouter_api_key}",
                    "HTTP-Referer": "https://showdown.local",
                    "X-Title": "Showdown",
                    "Content-Type": "application/json",
                },
                json=payload,
            )

            if response.status_code == 429:
                raise LLMRateLimitError("OpenRouter rate limit exceeded")
            if response.status_code == 401:
                raise LLMAuthenticationError("OpenRouter authentication failed")

            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            raise LLMConnectionError(f"OpenRouter HTTP error: {e}")
        except httpx.RequestError as e:
            raise LLMConnectionError(f"OpenRouter connection error: {e}")

        try:
            data = response.json()
        except ValueError as e:
            raise LLMResponseParseError(
                f"OpenRouter returned invalid JSON: {e}",
                raw_response=response.text[:500],
            )
        if not isinstance(data, dict):
            raise LLMResponseParseError(
                "OpenRouter returned an unexpected payload",
                raw_response=response.text[:500],
            )

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        usage = data.get("usage", {})
        input_tokens = usage.get("prompt_tokens", 0)
        output_tokens = usage.get("completion_tokens", 0)

        if tag:
            self._track_usage(tag, input_tokens, output_tokens)

        return LLMResponse(
            content=content,
            token_usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                model=model,
            ),
            model=model,
            finish_reason=choices[0].get("finish_reason"),
        )

    # =========================================================================
    # Public API
    # =========================================================================

    async def complete(
        self,
        model: str | ModelType,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
        retries: int = 3,
        retry_delay: float = 1.0,
        tag: str | None = None,
    ) -> LLMResponse:
        """
        Complete a chat conversation.

        Args:
            model: Model to use (ModelType enum or string)
            messages: List of message dicts with 'role' and 'content'
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            retries: Total attempts on transient errors (1 disables retrying)
            retry_delay: Initial delay between retries (exponential backoff)
            tag: Caller name for token tracking

        Returns:
            LLMResponse with content and token usage
        """
        model_str = model.value if isinstance(model, ModelType) else model
        provider = self._get_provider(model_str)

        if provider == ModelProvider.GEMINI:
            call = self._complete_gemini
        elif provider == ModelProvider.ANTHROPIC:
            call = self._complete_anthropic
        elif provider == ModelProvider.OPENAI:
            call = self._complete_openai
        else:
            call = self._complete_openrouter

        for attempt in range(retries):
            try:
                return await call(
                    model_str, messages, system, max_tokens, temperature, tag
                )
            except (LLMRateLimitError, LLMConnectionError) as e:
                if attempt < retries - 1:
                    delay = retry_delay * (2**attempt)
                    logger.warning(
                        f"{type(e).__name__} from {provider.value}, retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    raise

        raise LLMConnectionError("Max retries exceeded")


# =============================================================================
# Module-level client factory
# =============================================================================


_default_client: LLMClient | None = None


async def get_llm_client() -> LLMClient:
    """Get the default LLM client instance."""
    global _default_client
    if _default_client is None:
        _default_client = LLMClient()
        await _default_client._ensure_clients()
    return _default_client


async def close_llm_client() -> None:
    """Close the default LLM client."""
    global _default_client
    if _default_client:
        await _default_client.close()
        _default_client = None
