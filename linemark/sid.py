"""Generation of stable base62 identifiers."""

from __future__ import annotations

import os
from typing import BinaryIO

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
SID_LENGTH = 12
# Largest multiple of the alphabet size not above 256; higher bytes are rejected.
_THRESHOLD = len(ALPHABET) * (256 // len(ALPHABET))


class SIDGenerationError(Exception):
    """Raised when random input cannot be read."""


class _SystemRandom:
    def read(self, size: int) -> bytes:
        return os.urandom(size)


def generate(reader: BinaryIO | None = None) -> str:
    """Produce a 12-character base62 ID from random bytes, without modulo bias.

    Bytes are read one at a time from ``reader`` (the OS random source when
    omitted); bytes of 248 or more are discarded.
    """
    source = reader if reader is not None else _SystemRandom()
    chars: list[str] = []
    while len(chars) < SID_LENGTH:
        try:
            chunk = source.read(1)
        except OSError as exc:
            raise SIDGenerationError(f"reading random byte: {exc}") from exc
        if not chunk:
            raise SIDGenerationError("reading random byte: end of input")
        value = chunk[0]
        if value >= _THRESHOLD:
            continue
        chars.append(ALPHABET[value % len(ALPHABET)])
    return "".join(chars)