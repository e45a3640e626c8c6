"""Source coordinates."""

from dqdlpy.text.text import NO_POS, Pos, near_snippet

__all__ = [
    "NO_POS",
    "Pos",
    "near_snippet",
]
