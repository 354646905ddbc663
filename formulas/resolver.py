"""Variable resolution against a statistics record.

Resolution is an ordered list of small strategies, each a pure function
`(record, token) -> value | NOT_FOUND`. The default order tries the dotted
path first (`stats.female` walks `record["stats"]["female"]`) and then a flat
top-level key for legacy formulas that reference bare names (`female`).

`PARAM:` / `MANUAL:` tokens are never looked up in the record; they are bound
from per-element parameters and manual data.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Final

from .tokens import MANUAL_PREFIX, PARAM_PREFIX, split_special_token


class _NotFound:
    """Sentinel type for unresolved variables."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Final = _NotFound()

ResolutionStrategy = Callable[[Mapping[str, Any], str], Any]


def resolve_dotted_path(record: Mapping[str, Any], token: str) -> Any:
    """Walk a dotted token through nested mappings.

    Args:
        record: Statistics record, possibly with a nested `stats` mapping.
        token: Variable token such as `stats.female`.

    Returns:
        The bound value, or NOT_FOUND when any segment is missing or None.
    """

    current: Any = record
    for part in token.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return NOT_FOUND
        current = current[part]
    if current is None:
        return NOT_FOUND
    return current


def resolve_flat(record: Mapping[str, Any], token: str) -> Any:
    """Look the token up as a literal top-level key."""

    value = record.get(token)
    if value is None:
        return NOT_FOUND
    return value


DEFAULT_STRATEGIES: Final[tuple[ResolutionStrategy, ...]] = (resolve_dotted_path, resolve_flat)


def resolve_variable(
    token: str,
    record: Mapping[str, Any],
    *,
    strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES,
) -> Any:
    """Resolve a variable token by trying each strategy in order.

    Args:
        token: Bracket-stripped variable name.
        record: Statistics record.
        strategies: Ordered resolution strategies.

    Returns:
        The first value found, or NOT_FOUND.
    """

    for strategy in strategies:
        value = strategy(record, token)
        if value is not NOT_FOUND:
            return value
    return NOT_FOUND


def resolve_special_token(
    token: str,
    *,
    parameters: Mapping[str, Any] | None = None,
    manual_data: Mapping[str, Any] | None = None,
) -> Any:
    """Bind a `PARAM:` / `MANUAL:` token from the supplied element bindings.

    Returns:
        The bound value, or NOT_FOUND when the key has no binding.
    """

    split = split_special_token(token)
    if split is None:
        return NOT_FOUND
    prefix, key = split
    if prefix == PARAM_PREFIX:
        source = parameters
    elif prefix == MANUAL_PREFIX:
        source = manual_data
    else:
        return NOT_FOUND
    if not source:
        return NOT_FOUND
    value = source.get(key)
    if isinstance(value, Mapping):
        # Element parameters may be stored as {"value": 85, "label": ...}.
        value = value.get("value")
    if value is None:
        return NOT_FOUND
    return value
