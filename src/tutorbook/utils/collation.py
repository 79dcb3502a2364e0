"""Locale-tolerant ordering for student names."""

from __future__ import annotations

import unicodedata

_COMBINING_TILDE = "\u0303"


def name_sort_key(name: str) -> tuple[str, str]:
    """Return a key that orders names ignoring case and accents.

    ``"Álvaro"`` sorts next to ``"alvaro"`` and before ``"Beatriz"``; the
    second element keeps the ordering stable between such near-duplicates.
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    chars: list[str] = []
    for ch in decomposed:
        if ch == _COMBINING_TILDE:
            # ñ sorts after every other n-word and before o
            chars.append("~")
        elif not unicodedata.combining(ch):
            chars.append(ch)
    return "".join(chars).casefold(), name or ""
