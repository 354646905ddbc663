"""Variable catalog cache.

The catalog is the authoritative list of variable names a formula may
reference. It is read-mostly reference data supplied by a loader (database,
HTTP endpoint, YAML registry) and cached until explicitly invalidated or, when
configured, until a TTL elapses. Callers inject a VariableCatalog into the
validator and evaluator rather than reaching for ambient global state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from .dto import VariableDescriptor

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Iterable[VariableDescriptor]]


class VariableCatalog:
    """Cached, explicitly invalidated set of VariableDescriptor entries.

    Args:
        loader: Callable returning the current descriptors.
        ttl_seconds: Optional expiry; None means "until invalidate() is called".
        clock: Callable returning the current aware datetime (injectable for tests).
    """

    def __init__(
        self,
        loader: CatalogLoader,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()
        self._variables: tuple[VariableDescriptor, ...] | None = None
        self._by_name: dict[str, VariableDescriptor] = {}
        self.last_loaded_at: datetime | None = None

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[VariableDescriptor]) -> VariableCatalog:
        """Build a catalog over a fixed list of descriptors."""

        frozen = tuple(descriptors)
        return cls(lambda: frozen)

    def load(self) -> tuple[VariableDescriptor, ...]:
        """Force a reload from the loader and return the descriptors."""

        with self._lock:
            variables = tuple(self._loader())
            by_name: dict[str, VariableDescriptor] = {}
            for descriptor in variables:
                if descriptor.name in by_name:
                    logger.warning("Duplicate variable name in catalog: %s", descriptor.name)
                    continue
                by_name[descriptor.name] = descriptor
            self._variables = tuple(by_name.values())
            self._by_name = by_name
            self.last_loaded_at = self._clock()
        logger.info("Loaded %d catalog variables", len(self._variables))
        return self._variables

    def invalidate(self) -> None:
        """Drop the cached descriptors; the next read reloads them."""

        with self._lock:
            self._variables = None
            self._by_name = {}
            self.last_loaded_at = None
        logger.info("Variable catalog invalidated")

    @property
    def is_loaded(self) -> bool:
        return self._variables is not None

    def _is_expired(self) -> bool:
        if self._ttl_seconds is None or self.last_loaded_at is None:
            return False
        age = (self._clock() - self.last_loaded_at).total_seconds()
        return age >= self._ttl_seconds

    def variables(self) -> tuple[VariableDescriptor, ...]:
        """Return the cached descriptors, loading them when needed."""

        variables = self._variables
        if variables is None or self._is_expired():
            return self.load()
        return variables

    def names(self) -> frozenset[str]:
        """Return the set of known variable names."""

        return frozenset(descriptor.name for descriptor in self.variables())

    def get(self, name: str) -> VariableDescriptor | None:
        self.variables()
        return self._by_name.get(name)

    def is_known(self, name: str) -> bool:
        return self.get(name) is not None

    def example_usage(self, name: str) -> str | None:
        descriptor = self.get(name)
        if descriptor is None or not descriptor.example_usage:
            return None
        return descriptor.example_usage

    def by_category(self) -> dict[str, list[VariableDescriptor]]:
        """Group descriptors by category, preserving catalog order."""

        grouped: dict[str, list[VariableDescriptor]] = {}
        for descriptor in self.variables():
            grouped.setdefault(descriptor.category, []).append(descriptor)
        return grouped
