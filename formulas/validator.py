"""Static formula validation against the variable catalog.

Validation is catalog-focused and cheap enough to run on every keystroke in
the formula editor: it never evaluates the formula. Arithmetic well-formedness
is checked separately by `check_formula_syntax`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Union

from .arithmetic import FormulaSyntaxError, parse_expression
from .catalog import VariableCatalog
from .dto import FormulaValidationResult, VariableDescriptor
from .tokens import TOKEN_PATTERN, extract_variables, is_special_token

logger = logging.getLogger(__name__)

CatalogLike = Union[VariableCatalog, Iterable[VariableDescriptor], Iterable[str]]

# Stands in for every bracketed token during a syntax-only parse. Each token is
# one parenthesised operand, so `2[x]` does not parse.
SYNTAX_PLACEHOLDER = "(1)"


def catalog_names(catalog: CatalogLike) -> frozenset[str]:
    """Return the variable-name set for any supported catalog shape."""

    if isinstance(catalog, VariableCatalog):
        return catalog.names()
    names: set[str] = set()
    for entry in catalog:
        if isinstance(entry, VariableDescriptor):
            names.add(entry.name)
        else:
            names.add(str(entry))
    return frozenset(names)


def validate_formula(formula: str, catalog: CatalogLike) -> FormulaValidationResult:
    """Check that every bracketed token is a known variable or a special token.

    Args:
        formula: Formula text.
        catalog: VariableCatalog, descriptors, or plain variable names. An empty
            catalog knows no variables.

    Returns:
        FormulaValidationResult; unknown tokens are reported together, e.g.
        `Unknown variables: FOO, BAR`.
    """

    if not formula or not formula.strip():
        return FormulaValidationResult(is_valid=False, error="Formula is empty.")

    used = extract_variables(formula)
    known = catalog_names(catalog)
    unknown = [token for token in used if not is_special_token(token) and token not in known]
    if unknown:
        logger.debug("Formula references unknown variables: %s", unknown)
        return FormulaValidationResult(
            is_valid=False,
            error=f"Unknown variables: {', '.join(unknown)}",
            used_variables=used,
        )
    return FormulaValidationResult(is_valid=True, used_variables=used)


def check_formula_syntax(formula: str) -> str | None:
    """Return a syntax error message for the formula, or None when it parses.

    Every bracketed token is replaced with a numeric placeholder first, so the
    check is independent of any statistics record.
    """

    if not formula or not formula.strip():
        return "Formula is empty."
    text = TOKEN_PATTERN.sub(SYNTAX_PLACEHOLDER, formula)
    try:
        parse_expression(text)
    except FormulaSyntaxError as exc:
        return str(exc)
    return None
