"""Bracketed variable token helpers shared by the validator and evaluator."""

from __future__ import annotations

import re
from typing import Final

TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\[([A-Za-z0-9_.:]+)\]")

PARAM_PREFIX: Final[str] = "PARAM:"
MANUAL_PREFIX: Final[str] = "MANUAL:"
SPECIAL_PREFIXES: Final[tuple[str, ...]] = (PARAM_PREFIX, MANUAL_PREFIX)


def extract_variables(formula: str) -> tuple[str, ...]:
    """Return bracketed tokens in order of first appearance, without duplicates.

    Args:
        formula: Formula text such as `[stats.female] + [stats.male]`.

    Returns:
        Tuple of token names (brackets stripped).
    """

    seen: dict[str, None] = {}
    for match in TOKEN_PATTERN.finditer(formula or ""):
        seen.setdefault(match.group(1), None)
    return tuple(seen)


def is_special_token(token: str) -> bool:
    """Return True for `PARAM:` / `MANUAL:` tokens."""

    return token.startswith(SPECIAL_PREFIXES)


def split_special_token(token: str) -> tuple[str, str] | None:
    """Split a special token into `(prefix, key)`, or None for ordinary tokens."""

    for prefix in SPECIAL_PREFIXES:
        if token.startswith(prefix):
            return prefix, token[len(prefix):]
    return None


def token_pattern_for(token: str) -> re.Pattern[str]:
    """Return a pattern matching exactly `[token]`, with the name escaped."""

    return re.compile(r"\[" + re.escape(token) + r"\]")


def single_token(formula: str) -> str | None:
    """Return the token name when the formula is exactly one bracketed token."""

    match = TOKEN_PATTERN.fullmatch((formula or "").strip())
    return match.group(1) if match else None
