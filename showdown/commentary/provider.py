"""Post-round commentary from the text-generation service."""

import asyncio
import logging

from showdown.commentary.prompting import build_commentary_prompt
from showdown.config import Settings, get_settings
from showdown.lib.exceptions import CommentaryUnavailableError, LLMError
from showdown.lib.llm import LLMClient
from showdown.lib.models import Move, Outcome

logger = logging.getLogger(__name__)

USAGE_TAG = "commentary"


class CommentaryProvider:
    """
    Asks the LLM for a short witty line describing a finished round.

    Makes exactly one attempt per round. Any failure surfaces as
    CommentaryUnavailableError so the caller can substitute a fallback.
    """

    def __init__(self, llm_client: LLMClient, settings: Settings | None = None):
        self.llm_client = llm_client
        self.settings = settings or get_settings()

    async def generate(
        self,
        player_move: Move,
        opponent_move: Move,
        outcome: Outcome,
    ) -> str:
        """
        Generate commentary for a settled round.

        Raises:
            CommentaryUnavailableError: on service error, timeout, or empty text
        """
        messages = build_commentary_prompt(
            player_move,
            opponent_move,
            outcome,
            language=self.settings.display_language,
            max_chars=self.settings.commentary_max_chars,
        )

        try:
            response = await asyncio.wait_for(
                self.llm_client.complete(
                    model=self.settings.commentary_model,
                    messages=messages,
                    max_tokens=self.settings.commentary_max_tokens,
                    temperature=self.settings.commentary_temperature,
                    retries=1,
                    tag=USAGE_TAG,
                ),
                timeout=self.settings.commentary_timeout,
            )
        except asyncio.TimeoutError:
            raise CommentaryUnavailableError(
                f"Commentary timed out after {self.settings.commentary_timeout}s",
                reason="timeout",
                outcome=outcome.value,
            )
        except LLMError as e:
            raise CommentaryUnavailableError(
                f"Commentary service error: {e.message}",
                reason=type(e).__name__,
                outcome=outcome.value,
            ) from e

        text = (response.content or "").strip()
        if not text:
            raise CommentaryUnavailableError(
                "Commentary service returned no text",
                reason="empty",
                outcome=outcome.value,
            )

        logger.debug(f"Commentary for {outcome.value}: {text!r}")
        return text
