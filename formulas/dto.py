"""DTO types returned by the formula engine.

DTOs are plain data containers used to transport evaluation results to the
report layer. They intentionally avoid any Django/ORM dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

ResultKind = Literal["number", "NA", "error"]


@dataclass(frozen=True, slots=True)
class VariableDescriptor:
    """Catalog entry describing a variable a formula may reference.

    Attributes:
        name: Unique variable name, possibly a dotted path (e.g. `stats.female`).
        category: Grouping used by the variable picker (e.g. "Demographics").
        display_name: Human-friendly label.
        description: Optional long description.
        example_usage: Example formula using the variable.
        value_type: One of count/percentage/currency/numeric/text.
        derived: True for values computed from other statistics.
    """

    name: str
    category: str
    display_name: str
    description: str = ""
    example_usage: str = ""
    value_type: str = "count"
    derived: bool = False

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {
            "name": self.name,
            "category": self.category,
            "displayName": self.display_name,
            "description": self.description,
            "exampleUsage": self.example_usage,
            "type": self.value_type,
            "derived": self.derived,
        }


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Tagged outcome of evaluating a formula.

    Exactly one of three kinds:

    - `number`: `value` holds the rounded numeric result.
    - `NA`: well-formed formula whose result is undefined for the data.
    - `error`: malformed formula or disallowed construct; `message` explains.
    """

    kind: ResultKind
    value: float | None = None
    message: str | None = None

    @classmethod
    def number(cls, value: float) -> EvaluationResult:
        return cls(kind="number", value=float(value))

    @classmethod
    def na(cls, message: str | None = None) -> EvaluationResult:
        return cls(kind="NA", message=message)

    @classmethod
    def error(cls, message: str) -> EvaluationResult:
        return cls(kind="error", message=message)

    @property
    def is_number(self) -> bool:
        return self.kind == "number"

    @property
    def is_na(self) -> bool:
        return self.kind == "NA"

    @property
    def is_error(self) -> bool:
        return self.kind == "error"

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        payload: dict[str, Any] = {"kind": self.kind}
        if self.value is not None:
            payload["value"] = self.value
        if self.message:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True, slots=True)
class FormulaValidationResult:
    """Static validation outcome for a formula.

    Attributes:
        is_valid: True when every referenced token is known or special.
        error: Human-readable error message when invalid.
        used_variables: Tokens referenced by the formula, in order.
    """

    is_valid: bool
    error: str | None = None
    used_variables: tuple[str, ...] = ()

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        payload: dict[str, Any] = {"isValid": self.is_valid, "usedVariables": list(self.used_variables)}
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class StatsCoverage:
    """Which formula variables a statistics record can satisfy.

    Attributes:
        missing_variables: Tokens absent from the record.
        available_variables: Tokens present in the record.
    """

    missing_variables: tuple[str, ...]
    available_variables: tuple[str, ...]

    @property
    def is_complete(self) -> bool:
        return not self.missing_variables
