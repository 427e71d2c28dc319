#!/usr/bin/env python3
"""
Leaf builders for single comparisons.

Each builder turns one relational expression into one WP_Query shape:

- CompareBuilder:      ``{"post_type": "post"}``
- MetaCompareBuilder:  ``{"key": ..., "value": ..., "type": ..., "compare": ...}``
- TaxCompareBuilder:   ``{"taxonomy": ..., "field": ..., "terms": [...], "operator": ...}``

Operands are identified by their term type, not their position.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from ..exceptions import InvalidValueError, UnsupportedOperatorError
from ..expressions import (
    EntityFieldTerm, Expression, LiteralTerm, VariableTerm,
    as_list, is_sequence_value, type_key
)
from .base import BuildResult, QueryBuilder
from .operators import OperatorContext


# WP_Query meta cast types
META_TYPE_BINARY = "BINARY"
META_TYPE_NUMERIC = "NUMERIC"
META_TYPE_DECIMAL = "DECIMAL"
META_TYPE_DATETIME = "DATETIME"
META_TYPE_DATE = "DATE"
META_TYPE_TIME = "TIME"
META_TYPE_CHAR = "CHAR"

_LIST_OPERATORS = {"IN", "NOT IN"}
_RANGE_OPERATORS = {"BETWEEN", "NOT BETWEEN"}
_EXISTS_OPERATORS = {"EXISTS", "NOT EXISTS"}


class _LeafBuilder(QueryBuilder):
    """Shared operand handling for the leaf builders."""

    context: OperatorContext

    def _operands(self,
                  expression: Expression,
                  is_field: Callable[[Any], bool],
                  literal_optional: bool = False) -> Tuple[Any, Optional[LiteralTerm]]:
        """
        Pick the field term and the literal term out of an expression.

        Raises:
            ValueError: If the terms are not exactly one matching field and
                one literal (or no literal, when it is optional)
        """
        field_term = None
        literal = None

        for term in expression.terms:
            if field_term is None and is_field(term):
                field_term = term
            elif literal is None and isinstance(term, LiteralTerm):
                literal = term
            else:
                raise ValueError(f"Unexpected term {term!r}")

        if field_term is None:
            raise ValueError("No field term found")
        if literal is None and not literal_optional:
            raise ValueError("No value term found")

        return field_term, literal

    def _include_operator(self, operator: str) -> bool:
        return self.config.explicit_defaults or not self.resolver.is_default(operator, self.context)

    def _check_relational(self, expression: Any) -> Optional[BuildResult]:
        if not self._is_relational(expression):
            return self._fail("Expression is not a relational expression", expression)
        return None


class CompareBuilder(_LeafBuilder):
    """
    Builds a relational expression into a top-level WP_Query key-value entry.
    """

    context = OperatorContext.COMPARE

    def _operator(self, expression: Expression) -> str:
        return self.resolver.compare_operator(expression)

    def attempt(self, expression: Any, *args) -> BuildResult:
        rejected = self._check_relational(expression)
        if rejected:
            return rejected

        try:
            operator = self._operator(expression)
            variable, literal = self._operands(
                expression, lambda t: isinstance(t, VariableTerm)
            )
            value = self._normalize_value(literal.value)
        except (UnsupportedOperatorError, InvalidValueError, ValueError) as e:
            return self._fail("Expression is not a valid WP_Query compare", expression, cause=e)

        if operator in _LIST_OPERATORS:
            value = as_list(value)

        result: Dict[str, Any] = {variable.key: value}
        if self._include_operator(operator):
            result["compare"] = operator

        return BuildResult.success(result)


class MetaCompareBuilder(_LeafBuilder):
    """
    Builds a relational expression into a WP_Query meta query clause.
    """

    context = OperatorContext.META

    def _operator(self, expression: Expression) -> str:
        return self.resolver.meta_compare_operator(expression)

    def attempt(self, expression: Any, *args) -> BuildResult:
        rejected = self._check_relational(expression)
        if rejected:
            return rejected

        try:
            operator = self._operator(expression)
            field_term, literal = self._operands(
                expression,
                self._is_meta_field,
                literal_optional=operator in _EXISTS_OPERATORS
            )
            result = self._clause(field_term, literal, operator)
        except (UnsupportedOperatorError, InvalidValueError, ValueError) as e:
            return self._fail("Expression is not a valid WP_Query meta compare", expression, cause=e)

        return BuildResult.success(result)

    def _is_meta_field(self, term: Any) -> bool:
        return isinstance(term, EntityFieldTerm) and term.entity == self.config.meta_entity

    def _clause(self, field_term: EntityFieldTerm, literal: Optional[LiteralTerm], operator: str) -> Dict[str, Any]:
        clause: Dict[str, Any] = {"key": field_term.field}

        if literal is not None:
            raw = literal.value
            value = self._normalize_value(raw)

            if operator in _LIST_OPERATORS:
                value = as_list(value)
            elif operator in _RANGE_OPERATORS:
                if not is_sequence_value(value) or len(value) != 2:
                    raise ValueError(f"{operator} requires exactly 2 values")
            elif is_sequence_value(value) and operator not in _EXISTS_OPERATORS:
                raise ValueError(f"{operator} requires a single value")

            clause["value"] = value
            clause["type"] = self.cast_type(raw)

        if self._include_operator(operator):
            clause["compare"] = operator

        return clause

    def cast_type(self, value: Any) -> str:
        """
        Determine the WP_Query meta cast type for a value.

        Lists take the common type of their elements, or CHAR when mixed.
        """
        if isinstance(value, Enum):
            return self.cast_type(value.value)
        if is_sequence_value(value):
            types = {self.cast_type(v) for v in value}
            return types.pop() if len(types) == 1 else META_TYPE_CHAR

        # bool before int, datetime before date: subclass order matters
        if isinstance(value, bool):
            return META_TYPE_BINARY
        if isinstance(value, int):
            return META_TYPE_NUMERIC
        if isinstance(value, (float, Decimal)):
            return META_TYPE_DECIMAL
        if isinstance(value, datetime):
            return META_TYPE_DATETIME
        if isinstance(value, date):
            return META_TYPE_DATE
        if isinstance(value, time):
            return META_TYPE_TIME
        return META_TYPE_CHAR


class TaxCompareBuilder(_LeafBuilder):
    """
    Builds a relational expression into a WP_Query taxonomy query clause.

    The taxonomy is the field name of the taxonomy entity term. Terms are
    matched by ID when every term is an integer, otherwise by the configured
    default field.
    """

    context = OperatorContext.TAX

    def _operator(self, expression: Expression) -> str:
        return self.resolver.tax_compare_operator(expression)

    def attempt(self, expression: Any, *args) -> BuildResult:
        rejected = self._check_relational(expression)
        if rejected:
            return rejected

        try:
            operator = self._operator(expression)
            field_term, literal = self._operands(
                expression,
                self._is_tax_field,
                literal_optional=operator in _EXISTS_OPERATORS
            )
            result = self._clause(field_term, literal, operator)
        except (UnsupportedOperatorError, InvalidValueError, ValueError) as e:
            return self._fail("Expression is not a valid WP_Query taxonomy compare", expression, cause=e)

        return BuildResult.success(result)

    def _is_tax_field(self, term: Any) -> bool:
        return isinstance(term, EntityFieldTerm) and term.entity == self.config.tax_entity

    def _clause(self, field_term: EntityFieldTerm, literal: Optional[LiteralTerm], operator: str) -> Dict[str, Any]:
        clause: Dict[str, Any] = {"taxonomy": field_term.field}

        if literal is not None:
            terms = as_list(self._normalize_value(literal.value))
            if not terms and operator not in _EXISTS_OPERATORS:
                raise ValueError(f"{operator} requires at least one term")
            clause["field"] = self.term_field(terms)
            clause["terms"] = terms

        if self._include_operator(operator):
            clause["operator"] = operator

        return clause

    def term_field(self, terms: list) -> str:
        """Determine which term field the given identifiers refer to."""
        if terms and all(isinstance(t, int) and not isinstance(t, bool) for t in terms):
            return "term_id"
        return self.config.default_tax_field


def leaf_kind(expression: Expression) -> str:
    """Short description of a relational expression for log messages."""
    return f"{type_key(expression.type)}{' (negated)' if expression.negated else ''}"


__all__ = [
    'CompareBuilder', 'MetaCompareBuilder', 'TaxCompareBuilder',
    'leaf_kind'
]
