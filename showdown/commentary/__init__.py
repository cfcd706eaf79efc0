"""
Commentary generation components.

- prompting: prompt construction for a settled round.
- provider: CommentaryProvider that asks the LLM for a one-line remark.
"""

from showdown.commentary.prompting import build_commentary_prompt
from showdown.commentary.provider import CommentaryProvider

__all__ = [
    "CommentaryProvider",
    "build_commentary_prompt",
]
