"""Prompt construction for round commentary."""

from showdown.lib.locale import get_strings
from showdown.lib.models import Move, Outcome


def build_commentary_prompt(
    player_move: Move,
    opponent_move: Move,
    outcome: Outcome,
    language: str = "zh-TW",
    max_chars: int = 20,
) -> list[dict[str, str]]:
    """
    Build the user message asking for a one-line remark on a settled round.

    Args:
        player_move: Move the player threw
        opponent_move: Move the computer threw
        outcome: Result from the player's side
        language: Display language for labels and the reply
        max_chars: Length limit requested from the model

    Returns:
        A single chat-style user message
    """
    strings = get_strings(language)
    content = strings.prompt_template.format(
        player=strings.move_labels[player_move],
        opponent=strings.move_labels[opponent_move],
        outcome=strings.outcome_phrases[outcome],
        max_chars=max_chars,
    )
    return [{"role": "user", "content": content}]
