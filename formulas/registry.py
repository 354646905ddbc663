"""Default variable registry and chart definitions shipped with the engine.

Both are stored as YAML under `formulas/data/` so new stats fields can be added
without touching code. The registry seeds the database-backed catalog and
serves as the catalog loader when no database is involved.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .chart_config_codec import decode_chart_configuration
from .chart_config_dto import ChartConfiguration
from .dto import VariableDescriptor

DATA_DIR = Path(__file__).resolve().parent / "data"


def _load_yaml(filename: str) -> dict[str, Any]:
    raw = (DATA_DIR / filename).read_text(encoding="utf-8")
    return yaml.safe_load(raw) or {}


def descriptor_from_mapping(row: dict[str, Any]) -> VariableDescriptor:
    """Build a VariableDescriptor from a registry/API row."""

    name = str(row["name"])
    label = str(row.get("label") or row.get("displayName") or name)
    return VariableDescriptor(
        name=name,
        category=str(row.get("category") or "Other"),
        display_name=label,
        description=str(row.get("description") or ""),
        example_usage=str(row.get("exampleUsage") or f"[{name}]"),
        value_type=str(row.get("type") or "count"),
        derived=bool(row.get("derived", False)),
    )


@lru_cache(maxsize=1)
def default_variable_descriptors() -> tuple[VariableDescriptor, ...]:
    """Return the built-in variable registry."""

    payload = _load_yaml("default_variables.yaml")
    return tuple(descriptor_from_mapping(row) for row in payload.get("variables") or ())


@lru_cache(maxsize=1)
def default_chart_configurations() -> tuple[ChartConfiguration, ...]:
    """Return the built-in chart configurations."""

    payload = _load_yaml("default_charts.yaml")
    return tuple(decode_chart_configuration(row) for row in payload.get("charts") or ())
