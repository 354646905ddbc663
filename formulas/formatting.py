"""Display formatting for evaluated chart values.

Formatting options are an explicit `FormattingConfig` whose defaults are
resolved once, here, rather than at each render site.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Final

from .dto import EvaluationResult

NA_DISPLAY: Final[str] = "N/A"


@dataclass(frozen=True, slots=True)
class FormattingConfig:
    """How a numeric value is turned into display text.

    Attributes:
        rounded: Integer display when True, otherwise up to 2 decimals.
        prefix: Text placed before the number (e.g. "€").
        suffix: Text placed after the number (e.g. "%").
    """

    rounded: bool = True
    prefix: str = ""
    suffix: str = ""

    def as_json(self) -> dict[str, Any]:
        return {"rounded": self.rounded, "prefix": self.prefix, "suffix": self.suffix}


DEFAULT_FORMATTING: Final[FormattingConfig] = FormattingConfig()
PERCENT_FORMATTING: Final[FormattingConfig] = FormattingConfig(rounded=False, suffix="%")


def resolve_formatting(raw: object, *, default: FormattingConfig | None = None) -> FormattingConfig:
    """Resolve a loosely-typed formatting payload into a FormattingConfig.

    Args:
        raw: A FormattingConfig, a mapping with optional `rounded`/`prefix`/
            `suffix` keys, or None.
        default: Config used when `raw` is None or empty.

    Returns:
        FormattingConfig with every field populated.
    """

    fallback = default or DEFAULT_FORMATTING
    if isinstance(raw, FormattingConfig):
        return raw
    if not isinstance(raw, Mapping) or not raw:
        return fallback
    rounded = raw.get("rounded")
    return FormattingConfig(
        rounded=fallback.rounded if rounded is None else bool(rounded),
        prefix=str(raw.get("prefix") if raw.get("prefix") is not None else fallback.prefix),
        suffix=str(raw.get("suffix") if raw.get("suffix") is not None else fallback.suffix),
    )


def _numeric_text(value: float, *, rounded: bool) -> str:
    quantum = Decimal("1") if rounded else Decimal("0.01")
    quantized = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if quantized == 0:
        quantized = abs(quantized)
    text = format(quantized, "f")
    if not rounded and "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_value(value: float | str | EvaluationResult | None, config: FormattingConfig | None = None) -> str:
    """Render a value for display.

    NA, error results, None and non-finite numbers all render as `N/A`,
    ignoring prefix, suffix and rounding.

    Args:
        value: Raw number, the string "NA", or an EvaluationResult.
        config: Formatting options; defaults to `DEFAULT_FORMATTING`.

    Returns:
        Display string such as `€1234` or `12.35%`.
    """

    if isinstance(value, EvaluationResult):
        if not value.is_number:
            return NA_DISPLAY
        value = value.value
    if value is None or isinstance(value, (str, bool)):
        return NA_DISPLAY
    if not math.isfinite(value):
        return NA_DISPLAY
    config = config or DEFAULT_FORMATTING
    return f"{config.prefix}{_numeric_text(value, rounded=config.rounded)}{config.suffix}"


def parse_formatted_value(text: str, config: FormattingConfig | None = None) -> float | None:
    """Recover the number from a display string produced by `format_value`.

    Returns:
        The parsed float, or None for `N/A` and unparseable text.
    """

    if text is None or text == NA_DISPLAY:
        return None
    body = text.strip()
    if config is not None:
        if config.prefix and body.startswith(config.prefix):
            body = body[len(config.prefix):]
        if config.suffix and body.endswith(config.suffix):
            body = body[: -len(config.suffix)]
    try:
        return float(Decimal(body.strip()))
    except InvalidOperation:
        return None
