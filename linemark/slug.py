"""Conversion of titles into filename-friendly slugs."""

from __future__ import annotations

import unicodedata

# Characters Python treats as whitespace that are not whitespace in Unicode.
_NOT_UNICODE_SPACE = frozenset("\x1c\x1d\x1e\x1f")


def _is_space(ch: str) -> bool:
    return ch.isspace() and ch not in _NOT_UNICODE_SPACE


def slugify(text: str) -> str:
    """Lowercase, strip accents and punctuation, and join words with dashes."""
    out: list[str] = []
    prev_dash = False
    for ch in unicodedata.normalize("NFD", text):
        category = unicodedata.category(ch)
        if category == "Mn":
            continue
        if category.startswith("L") or category == "Nd":
            out.append(ch.lower())
            prev_dash = False
        elif _is_space(ch) or ch == "-":
            if not prev_dash and out:
                out.append("-")
                prev_dash = True
    return "".join(out).rstrip("-")