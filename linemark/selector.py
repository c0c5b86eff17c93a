"""Parsing node selectors: materialized paths and stable IDs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_MP_RE = re.compile(r"[0-9]{3}(?:-[0-9]{3})*")
_SID_RE = re.compile(r"[A-Za-z0-9]{8,12}")


class InvalidSelectorError(ValueError):
    """Raised when a selector string cannot be parsed."""


class SelectorKind(Enum):
    """Whether a selector names a materialized path or a stable ID."""

    MP = "mp"
    SID = "sid"

    @property
    def prefix(self) -> str:
        return f"{self.value}:"


@dataclass(frozen=True)
class Selector:
    """A parsed node reference."""

    kind: SelectorKind
    value: str
    explicit: bool = False

    def __str__(self) -> str:
        if self.explicit:
            return self.kind.prefix + self.value
        return self.value


def _is_valid_mp(text: str) -> bool:
    return _MP_RE.fullmatch(text) is not None and "000" not in text.split("-")


def _is_valid_sid(text: str) -> bool:
    return _SID_RE.fullmatch(text) is not None


_VALIDATORS = {SelectorKind.MP: _is_valid_mp, SelectorKind.SID: _is_valid_sid}


def _selector_error(text: str) -> InvalidSelectorError:
    return InvalidSelectorError(f"invalid selector: {text!r}")


def parse_selector(text: str) -> Selector:
    """Parse ``mp:<path>``, ``sid:<id>``, or a bare path or ID."""
    text = text.strip()
    if not text:
        raise InvalidSelectorError("invalid selector: empty input")

    for kind, is_valid in _VALIDATORS.items():
        if text.startswith(kind.prefix):
            value = text[len(kind.prefix):]
            if not is_valid(value):
                raise _selector_error(text)
            return Selector(kind, value, explicit=True)

    if ":" in text:
        raise _selector_error(text)

    for kind, is_valid in _VALIDATORS.items():
        if is_valid(text):
            return Selector(kind, text)

    raise _selector_error(text)