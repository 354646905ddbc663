"""Statistics record helpers: derived metrics, sample data and data quality.

A statistics record is a mapping from variable name to number or string. It
may be flat (`{"female": 5}`) or expose the per-event counters under a nested
`stats` mapping (`{"stats": {"female": 5}}`). Helpers here never mutate the
input record.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

REQUIRED_BASE_METRICS: Final[tuple[str, ...]] = (
    "remoteImages",
    "hostessImages",
    "selfies",
    "indoor",
    "outdoor",
    "stadium",
    "female",
    "male",
    "genAlpha",
    "genYZ",
    "genX",
    "boomer",
    "merched",
    "jersey",
    "scarf",
    "flags",
    "baseballCap",
    "other",
)

OPTIONAL_METRICS: Final[tuple[str, ...]] = (
    "eventAttendees",
    "visitQrCode",
    "visitShortUrl",
    "visitWeb",
    "eventValuePropositionVisited",
    "eventValuePropositionPurchases",
    "eventTicketPurchases",
    "eventResultHome",
    "eventResultVisitor",
    "bitlyTotalClicks",
    "bitlyUniqueClicks",
    "bitlyMobileClicks",
)

# Derived metric -> component fields (all must be present to compute it).
DERIVED_METRICS: Final[dict[str, tuple[str, ...]]] = {
    "allImages": ("remoteImages", "hostessImages", "selfies"),
    "remoteFans": ("indoor", "outdoor"),
    "totalFans": ("remoteFans", "stadium"),
    "totalUnder40": ("genAlpha", "genYZ"),
    "totalOver40": ("genX", "boomer"),
}

SAMPLE_STATS: Final[dict[str, Any]] = {
    "stats": {
        "remoteImages": 10,
        "hostessImages": 25,
        "selfies": 15,
        "indoor": 50,
        "outdoor": 30,
        "stadium": 200,
        "female": 120,
        "male": 160,
        "genAlpha": 20,
        "genYZ": 100,
        "genX": 80,
        "boomer": 80,
        "merched": 40,
        "jersey": 15,
        "scarf": 8,
        "flags": 12,
        "baseballCap": 5,
        "other": 3,
        "approvedImages": 45,
        "rejectedImages": 5,
        "eventAttendees": 1000,
        "eventTicketPurchases": 850,
        "eventResultHome": 2,
        "eventResultVisitor": 1,
        "jerseyPrice": 85,
        "scarfPrice": 25,
        "flagsPrice": 15,
        "capPrice": 20,
        "otherPrice": 10,
    }
}


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _enrich_level(values: Mapping[str, Any]) -> dict[str, Any]:
    """Add derived metrics to one mapping level when all components exist."""

    enriched = dict(values)
    for name, components in DERIVED_METRICS.items():
        if enriched.get(name) is not None:
            continue
        parts = [enriched.get(component) for component in components]
        if all(_is_number(part) for part in parts):
            enriched[name] = sum(parts)
    return enriched


def ensure_derived_metrics(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of the record with derived metrics filled in.

    Derived values (`allImages`, `remoteFans`, `totalFans`, `totalUnder40`,
    `totalOver40`) are computed only from components that are present; a
    missing component leaves the derived value absent rather than guessing 0.
    Both the top level and a nested `stats` mapping are enriched.

    Args:
        record: Statistics record (flat or with nested `stats`).

    Returns:
        New dict with derived metrics added where computable.
    """

    enriched = _enrich_level(record)
    nested = record.get("stats")
    if isinstance(nested, Mapping):
        enriched["stats"] = _enrich_level(nested)
    return enriched


def stats_values(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the mapping holding per-event counters (nested `stats` or the record)."""

    nested = record.get("stats")
    return nested if isinstance(nested, Mapping) else record


@dataclass(frozen=True, slots=True)
class StatsQuality:
    """Data completeness indicators for a statistics record.

    Attributes:
        completeness: Share of required+optional fields present (0-100).
        missing_required: Required base metrics that are absent.
        missing_optional: Optional metrics that are absent.
        data_quality: excellent/good/fair/poor/insufficient.
        has_minimum_data: True when no required metric is missing.
    """

    completeness: int
    missing_required: tuple[str, ...]
    missing_optional: tuple[str, ...]
    data_quality: str
    has_minimum_data: bool

    def as_json(self) -> dict[str, Any]:
        return {
            "completeness": self.completeness,
            "missingRequired": list(self.missing_required),
            "missingOptional": list(self.missing_optional),
            "dataQuality": self.data_quality,
            "hasMinimumData": self.has_minimum_data,
        }


def assess_stats_quality(record: Mapping[str, Any]) -> StatsQuality:
    """Score how complete a statistics record is.

    Args:
        record: Statistics record (flat or with nested `stats`).

    Returns:
        StatsQuality for UI indicators.
    """

    values = stats_values(record)
    missing_required = tuple(name for name in REQUIRED_BASE_METRICS if values.get(name) is None)
    missing_optional = tuple(name for name in OPTIONAL_METRICS if values.get(name) is None)
    total = len(REQUIRED_BASE_METRICS) + len(OPTIONAL_METRICS)
    present = total - len(missing_required) - len(missing_optional)
    completeness = round(present / total * 100)

    if completeness >= 90:
        label = "excellent"
    elif completeness >= 75:
        label = "good"
    elif completeness >= 50:
        label = "fair"
    elif completeness >= 25:
        label = "poor"
    else:
        label = "insufficient"

    return StatsQuality(
        completeness=completeness,
        missing_required=missing_required,
        missing_optional=missing_optional,
        data_quality=label,
        has_minimum_data=not missing_required,
    )
