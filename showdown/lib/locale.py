"""Localised display strings and prompt templates."""

from dataclasses import dataclass

from showdown.lib.models import Move, Outcome

DEFAULT_LANGUAGE = "zh-TW"


@dataclass(frozen=True)
class LocaleStrings:
    """All user-facing text for one language."""

    move_labels: dict[Move, str]
    outcome_phrases: dict[Outcome, str]
    idle_greeting: str
    thinking_placeholder: str
    fallbacks: dict[Outcome, str]
    prompt_template: str


ZH_TW = LocaleStrings(
    move_labels={
        Move.ROCK: "石頭",
        Move.PAPER: "布",
        Move.SCISSORS: "剪刀",
    },
    outcome_phrases={
        Outcome.WIN: "玩家贏了",
        Outcome.LOSE: "玩家輸了",
        Outcome.DRAW: "平手",
    },
    idle_greeting="準備好開始猜拳了嗎？",
    thinking_placeholder="...",
    fallbacks={
        Outcome.WIN: "運氣不錯喔！",
        Outcome.LOSE: "再接再厲！",
        Outcome.DRAW: "不分軒輊！",
    },
    prompt_template=(
        "這是一個猜拳遊戲。\n"
        "玩家出了：{player}\n"
        "電腦出了：{opponent}\n"
        "結果：{outcome}\n"
        "\n"
        "請用繁體中文，給出一句簡短、幽默或帶有輕微嘲諷的評論（{max_chars}字以內）。\n"
        "如果是玩家贏，可以稱讚運氣或技巧；如果是玩家輸，可以調侃一下；平手則說真有默契。\n"
        "語氣要活潑有趣。"
    ),
)

EN = LocaleStrings(
    move_labels={
        Move.ROCK: "Rock",
        Move.PAPER: "Paper",
        Move.SCISSORS: "Scissors",
    },
    outcome_phrases={
        Outcome.WIN: "the player won",
        Outcome.LOSE: "the player lost",
        Outcome.DRAW: "it was a draw",
    },
    idle_greeting="Ready to play rock-paper-scissors?",
    thinking_placeholder="...",
    fallbacks={
        Outcome.WIN: "Lucky you!",
        Outcome.LOSE: "Better luck next time!",
        Outcome.DRAW: "Great minds think alike!",
    },
    prompt_template=(
        "This is a game of rock-paper-scissors.\n"
        "The player threw: {player}\n"
        "The computer threw: {opponent}\n"
        "Result: {outcome}\n"
        "\n"
        "Reply in English with one short, funny or gently teasing remark "
        "(at most {max_chars} words).\n"
        "Praise luck or skill on a win, tease a little on a loss, "
        "and call a draw a sign of great minds.\n"
        "Keep the tone lively."
    ),
)

LOCALES: dict[str, LocaleStrings] = {
    "zh-TW": ZH_TW,
    "en": EN,
}


def get_strings(language: str) -> LocaleStrings:
    """Return strings for a language, falling back to the default."""
    return LOCALES.get(language, LOCALES[DEFAULT_LANGUAGE])
