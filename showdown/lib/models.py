"""Pydantic models for Showdown."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class Move(str, Enum):
    """A hand the player or the opponent can throw."""

    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    @property
    def icon(self) -> str:
        """Display glyph for this move."""
        return MOVE_ICONS[self]

    @property
    def beats(self) -> "Move":
        """The single move this one defeats."""
        return BEATS[self]

    def label(self, language: str = "zh-TW") -> str:
        """Localised display name."""
        from showdown.lib.locale import get_strings

        return get_strings(language).move_labels[self]


class Outcome(str, Enum):
    """Round result from the player's perspective."""

    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


class RoundPhase(str, Enum):
    """Round lifecycle phase."""

    IDLE = "idle"
    DECIDING = "deciding"  # Decision delay running
    SETTLED = "settled"


class CommentarySource(str, Enum):
    """Where the current commentary line came from."""

    IDLE = "idle"
    PLACEHOLDER = "placeholder"
    GENERATED = "generated"
    FALLBACK = "fallback"


MOVE_ICONS: dict[Move, str] = {
    Move.ROCK: "✊",
    Move.PAPER: "🖐️",
    Move.SCISSORS: "✌️",
}

# Each move beats exactly one other; together they form a 3-cycle.
BEATS: dict[Move, Move] = {
    Move.ROCK: Move.SCISSORS,
    Move.PAPER: Move.ROCK,
    Move.SCISSORS: Move.PAPER,
}


# =============================================================================
# Game State
# =============================================================================


class ScoreBoard(BaseModel):
    """Session-long win/lose/draw counters."""

    player_wins: int = Field(default=0, ge=0)
    opponent_wins: int = Field(default=0, ge=0)
    draws: int = Field(default=0, ge=0)

    @property
    def total_rounds(self) -> int:
        return self.player_wins + self.opponent_wins + self.draws

    def record(self, outcome: Outcome) -> None:
        """Count one settled round."""
        if outcome == Outcome.WIN:
            self.player_wins += 1
        elif outcome == Outcome.LOSE:
            self.opponent_wins += 1
        else:
            self.draws += 1


class RoundState(BaseModel):
    """Transient state of the current round."""

    player_move: Move | None = None
    opponent_move: Move | None = None
    outcome: Outcome | None = None
    phase: RoundPhase = RoundPhase.IDLE
    generation: int = 0  # Decision cycle tag


class GameSnapshot(BaseModel):
    """Read-only view of the engine handed to render collaborators."""

    model_config = ConfigDict(frozen=True)

    round: RoundState
    scores: ScoreBoard
    commentary: str
    commentary_source: CommentarySource
    can_submit: bool


# =============================================================================
# API Models
# =============================================================================


class ChoiceRequest(BaseModel):
    """Player choice submitted by the UI."""

    move: Move


class ChoiceResponse(BaseModel):
    """Result of a choice submission."""

    accepted: bool
    snapshot: GameSnapshot


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"


class ConfigResponse(BaseModel):
    """Display options for render collaborators."""

    language: str
    decision_delay: float
    moves: list[dict[str, str]]
    outcomes: list[str]


# =============================================================================
# LLM Accounting
# =============================================================================


class TokenUsage(BaseModel):
    """Token usage for a single LLM call or an accumulated total."""

    input_tokens: int = 0
    output_tokens: int = 0
    model: str | None = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
