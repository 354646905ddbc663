"""Unit tests for the variable catalog cache."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from formulas.catalog import VariableCatalog
from formulas.dto import VariableDescriptor

pytestmark = pytest.mark.unit

FEMALE = VariableDescriptor(name="stats.female", category="Demographics", display_name="Female")
MALE = VariableDescriptor(name="stats.male", category="Demographics", display_name="Male")
JERSEY = VariableDescriptor(
    name="stats.jersey",
    category="Merchandise",
    display_name="Jersey",
    example_usage="[stats.jersey] * [PARAM:jerseyPrice]",
)


class _CountingLoader:
    def __init__(self, *descriptors: VariableDescriptor) -> None:
        self.descriptors = list(descriptors)
        self.calls = 0

    def __call__(self) -> list[VariableDescriptor]:
        self.calls += 1
        return list(self.descriptors)


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_catalog_loads_lazily_and_caches() -> None:
    """The loader runs once until the catalog is invalidated."""

    loader = _CountingLoader(FEMALE, MALE)
    catalog = VariableCatalog(loader)
    assert catalog.is_loaded is False
    assert catalog.last_loaded_at is None

    assert catalog.names() == frozenset({"stats.female", "stats.male"})
    assert catalog.is_known("stats.male")
    assert loader.calls == 1
    assert catalog.last_loaded_at is not None


def test_invalidate_forces_reload() -> None:
    """New descriptors are visible only after invalidation."""

    loader = _CountingLoader(FEMALE)
    catalog = VariableCatalog(loader)
    catalog.variables()
    loader.descriptors.append(MALE)
    assert not catalog.is_known("stats.male")

    catalog.invalidate()
    assert catalog.is_loaded is False
    assert catalog.is_known("stats.male")
    assert loader.calls == 2


def test_ttl_expiry_reloads() -> None:
    """With a TTL, a stale catalog reloads on the next read."""

    clock = _Clock()
    loader = _CountingLoader(FEMALE)
    catalog = VariableCatalog(loader, ttl_seconds=60, clock=clock)
    catalog.variables()
    clock.now += timedelta(seconds=30)
    catalog.variables()
    assert loader.calls == 1

    clock.now += timedelta(seconds=31)
    catalog.variables()
    assert loader.calls == 2
    assert catalog.last_loaded_at == clock.now


def test_duplicate_names_keep_first_entry() -> None:
    """Duplicate names are dropped after the first occurrence."""

    duplicate = VariableDescriptor(name="stats.female", category="Other", display_name="Dup")
    catalog = VariableCatalog.from_descriptors([FEMALE, duplicate])
    assert catalog.variables() == (FEMALE,)
    assert catalog.get("stats.female") is FEMALE


def test_lookup_helpers() -> None:
    """Grouping and example usage read from descriptors."""

    catalog = VariableCatalog.from_descriptors([FEMALE, JERSEY, MALE])
    grouped = catalog.by_category()
    assert list(grouped) == ["Demographics", "Merchandise"]
    assert grouped["Demographics"] == [FEMALE, MALE]
    assert catalog.example_usage("stats.jersey") == "[stats.jersey] * [PARAM:jerseyPrice]"
    assert catalog.example_usage("stats.female") is None
    assert catalog.get("stats.unknown") is None
