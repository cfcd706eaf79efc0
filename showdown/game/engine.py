"""Round lifecycle engine.

Drives a single rock-paper-scissors round from choice to commentary:

    IDLE --submit_choice--> DECIDING --(delay)--> SETTLED --submit_choice--> DECIDING
    any phase --reset_session--> IDLE

All mutation happens on the running asyncio loop. The decision delay and the
commentary fetch run as tasks; each decision cycle is tagged with a
generation number and results from a superseded generation are dropped.
"""

import asyncio
import logging
import random
from typing import Callable

from showdown.commentary.provider import CommentaryProvider
from showdown.config import Settings, get_settings
from showdown.game.rules import judge, pick_opponent_move
from showdown.lib.locale import get_strings
from showdown.lib.models import (
    CommentarySource,
    GameSnapshot,
    Move,
    Outcome,
    RoundPhase,
    RoundState,
    ScoreBoard,
)

logger = logging.getLogger(__name__)

Listener = Callable[[GameSnapshot], None]


class RoundEngine:
    """
    Owns round state, the session scoreboard and the current commentary.

    Render collaborators read `snapshot()` (or `subscribe()` to changes) and
    call `submit_choice()` / `reset_session()`. Nothing else mutates state.
    """

    def __init__(
        self,
        provider: CommentaryProvider,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        decision_delay: float | None = None,
    ):
        """
        Initialize the engine.

        Args:
            provider: Commentary source for settled rounds
            settings: Application settings (defaults to the cached instance)
            rng: Random source for the opponent; seeded from settings if omitted
            decision_delay: Seconds between choice and reveal (overrides settings)
        """
        self.provider = provider
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.decision_delay = (
            self.settings.decision_delay if decision_delay is None else decision_delay
        )
        self.strings = get_strings(self.settings.display_language)

        self.round = RoundState()
        self.scores = ScoreBoard()
        self.commentary = self.strings.idle_greeting
        self.commentary_source = CommentarySource.IDLE

        self._generation = 0
        self._decision_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

    # =========================================================================
    # Observation
    # =========================================================================

    @property
    def phase(self) -> RoundPhase:
        return self.round.phase

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> GameSnapshot:
        """Return a detached copy of the observable state."""
        return GameSnapshot(
            round=self.round.model_copy(),
            scores=self.scores.model_copy(),
            commentary=self.commentary,
            commentary_source=self.commentary_source,
            can_submit=self.round.phase != RoundPhase.DECIDING,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        The listener is called with a fresh snapshot after every observable
        change. Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

    # =========================================================================
    # Operations
    # =========================================================================

    def submit_choice(self, move: Move) -> bool:
        """
        Start a round with the player's move.

        Ignored while a round is already deciding.

        Returns:
            True if the round started, False if the call was ignored
        """
        if self.round.phase == RoundPhase.DECIDING:
            logger.debug(f"Ignoring {move.value}: round {self._generation} still deciding")
            return False

        self._generation += 1
        generation = self._generation

        self.round = RoundState(phase=RoundPhase.DECIDING, generation=generation)
        self.commentary = self.strings.thinking_placeholder
        self.commentary_source = CommentarySource.PLACEHOLDER

        self._decision_task = self._spawn(self._decide(generation, move))
        self._notify()
        return True

    def reset_session(self) -> None:
        """Clear scores and return to idle from any phase."""
        self._generation += 1
        if self._decision_task is not None and not self._decision_task.done():
            self._decision_task.cancel()
        self._decision_task = None

        self.scores = ScoreBoard()
        self.round = RoundState(generation=self._generation)
        self.commentary = self.strings.idle_greeting
        self.commentary_source = CommentarySource.IDLE

        logger.info("Session reset")
        self._notify()

    async def wait_idle(self) -> None:
        """Wait until no decision or commentary task is pending."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """
        Cancel pending tasks and invalidate in-flight results.

        A round cut off while deciding returns to idle, and a settled round
        whose commentary was cancelled gets the fallback line. Scores are kept.
        """
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        await self.wait_idle()
        self._decision_task = None

        if self.round.phase == RoundPhase.DECIDING:
            self.round = RoundState(generation=self._generation)
            self.commentary = self.strings.idle_greeting
            self.commentary_source = CommentarySource.IDLE
            self._notify()
        elif (
            self.round.phase == RoundPhase.SETTLED
            and self.commentary_source == CommentarySource.PLACEHOLDER
        ):
            self.commentary = self.strings.fallbacks[self.round.outcome]
            self.commentary_source = CommentarySource.FALLBACK
            self._notify()

    # =========================================================================
    # Round Resolution
    # =========================================================================

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _decide(self, generation: int, move: Move) -> None:
        """Wait out the decision delay, then settle the round."""
        await asyncio.sleep(self.decision_delay)

        if not self._is_current(generation):
            logger.debug(f"Discarding stale resolution for round {generation}")
            return

        self._settle(generation, move)

    def _settle(self, generation: int, move: Move) -> None:
        """Pick the opponent, score the round and request commentary."""
        opponent = pick_opponent_move(self.rng)
        outcome = judge(move, opponent)

        self.scores.record(outcome)
        self.round = RoundState(
            player_move=move,
            opponent_move=opponent,
            outcome=outcome,
            phase=RoundPhase.SETTLED,
            generation=generation,
        )
        self._decision_task = None

        logger.info(
            f"Round {generation} settled: {move.value} vs {opponent.value} -> "
            f"{outcome.value} (score {self.scores.player_wins}-"
            f"{self.scores.opponent_wins}-{self.scores.draws})"
        )
        self._notify()

        self._spawn(self._fetch_commentary(generation, move, opponent, outcome))

    async def _fetch_commentary(
        self,
        generation: int,
        move: Move,
        opponent: Move,
        outcome: Outcome,
    ) -> None:
        """Fetch commentary, falling back to a fixed line on any failure."""
        try:
            text = (await self.provider.generate(move, opponent, outcome)).strip()
        except Exception as e:
            if self._is_current(generation):
                logger.warning(f"Commentary unavailable for round {generation}: {e}")
            text = ""

        if not self._is_current(generation):
            logger.debug(f"Discarding stale commentary for round {generation}")
            return

        if text:
            self.commentary = text
            self.commentary_source = CommentarySource.GENERATED
        else:
            self.commentary = self.strings.fallbacks[outcome]
            self.commentary_source = CommentarySource.FALLBACK
        self._notify()


# =============================================================================
# Factory Functions
# =============================================================================


def create_engine(
    provider: CommentaryProvider,
    settings: Settings | None = None,
) -> RoundEngine:
    """
    Create a RoundEngine from settings.

    Args:
        provider: Commentary provider
        settings: Optional settings override

    Returns:
        Configured RoundEngine
    """
    return RoundEngine(provider=provider, settings=settings)
