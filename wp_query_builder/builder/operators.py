#!/usr/bin/env python3
"""
Operator resolution for WP_Query arguments.

Each context (plain compare, meta compare, taxonomy compare, relation) has its
own table mapping an expression type to a ``(token, negated_token)`` pair.
Negation picks the opposite token rather than prefixing "NOT". A ``None``
negated token means the type cannot be negated in that context.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..exceptions import InvalidValueError, UnsupportedOperatorError
from ..expressions import BooleanType, Expression, RelationalType
from ..utils.strings import StringNormalizer


class OperatorContext(Enum):
    COMPARE = "compare"
    META = "meta"
    TAX = "tax"
    RELATION = "relation"


OperatorPair = Tuple[str, Optional[str]]

_COMPARE_OPERATORS: Dict[RelationalType, OperatorPair] = {
    RelationalType.EQUAL_TO: ("=", "!="),
    RelationalType.NOT_EQUAL_TO: ("!=", "="),
    RelationalType.GREATER_THAN: (">", "<="),
    RelationalType.GREATER_EQUAL_TO: (">=", "<"),
    RelationalType.LESS_THAN: ("<", ">="),
    RelationalType.LESS_EQUAL_TO: ("<=", ">"),
    RelationalType.IN: ("IN", "NOT IN"),
    RelationalType.NOT_IN: ("NOT IN", "IN"),
}

_META_OPERATORS: Dict[RelationalType, OperatorPair] = {
    **_COMPARE_OPERATORS,
    RelationalType.LIKE: ("LIKE", "NOT LIKE"),
    RelationalType.BETWEEN: ("BETWEEN", "NOT BETWEEN"),
    RelationalType.EXISTS: ("EXISTS", "NOT EXISTS"),
    RelationalType.REGEXP: ("REGEXP", "NOT REGEXP"),
}

# Equality against a taxonomy means membership of the term set
_TAX_OPERATORS: Dict[RelationalType, OperatorPair] = {
    RelationalType.EQUAL_TO: ("IN", "NOT IN"),
    RelationalType.NOT_EQUAL_TO: ("NOT IN", "IN"),
    RelationalType.IN: ("IN", "NOT IN"),
    RelationalType.NOT_IN: ("NOT IN", "IN"),
    RelationalType.EXISTS: ("EXISTS", "NOT EXISTS"),
    RelationalType.ALL: ("AND", None),
}

_RELATION_OPERATORS: Dict[BooleanType, OperatorPair] = {
    BooleanType.AND: ("AND", None),
    BooleanType.OR: ("OR", None),
}


class OperatorResolver:
    """
    Resolves expression types to WP_Query operator tokens.
    """

    TABLES: Dict[OperatorContext, Dict[Any, OperatorPair]] = {
        OperatorContext.COMPARE: _COMPARE_OPERATORS,
        OperatorContext.META: _META_OPERATORS,
        OperatorContext.TAX: _TAX_OPERATORS,
        OperatorContext.RELATION: _RELATION_OPERATORS,
    }

    # Operators WP_Query assumes when none is given
    DEFAULTS: Dict[OperatorContext, str] = {
        OperatorContext.COMPARE: "=",
        OperatorContext.META: "=",
        OperatorContext.TAX: "IN",
        OperatorContext.RELATION: "AND",
    }

    def __init__(self, normalizer: Optional[StringNormalizer] = None):
        self.normalizer = normalizer or StringNormalizer()
        # Index tables by lowercased type value so raw strings resolve too
        self._tables = {
            context: {t.value: pair for t, pair in table.items()}
            for context, table in self.TABLES.items()
        }

    def resolve(self, expr_type: Any, negated: bool, context: OperatorContext) -> str:
        """
        Resolve a type and negation flag to an operator token.

        Args:
            expr_type: Enum member or type string
            negated: Whether the expression is negated
            context: Resolver context

        Returns:
            The operator token

        Raises:
            UnsupportedOperatorError: If the type has no mapping in the context,
                or cannot be negated there
        """
        key = self._key(expr_type, negated, context)
        pair = self._tables[context].get(key)

        if pair is None:
            raise UnsupportedOperatorError(key, context.value, negated)

        token, negated_token = pair
        if not negated:
            return token
        if negated_token is None:
            raise UnsupportedOperatorError(key, context.value, negated)

        return negated_token

    def supports(self, expr_type: Any, context: OperatorContext) -> bool:
        """Check if a type has a mapping in the given context."""
        try:
            key = self._key(expr_type, False, context)
        except UnsupportedOperatorError:
            return False
        return key in self._tables[context]

    def _key(self, expr_type: Any, negated: bool, context: OperatorContext) -> str:
        try:
            return self.normalizer.normalize(expr_type).strip().lower()
        except InvalidValueError as e:
            raise UnsupportedOperatorError(expr_type, context.value, negated) from e

    def is_default(self, operator: str, context: OperatorContext) -> bool:
        """Check if an operator is the one WP_Query assumes for the context."""
        return operator == self.DEFAULTS[context]

    # Per-context shortcuts taking the expression itself

    def compare_operator(self, expression: Expression) -> str:
        return self.resolve(expression.type, expression.negated, OperatorContext.COMPARE)

    def meta_compare_operator(self, expression: Expression) -> str:
        return self.resolve(expression.type, expression.negated, OperatorContext.META)

    def tax_compare_operator(self, expression: Expression) -> str:
        return self.resolve(expression.type, expression.negated, OperatorContext.TAX)

    def relation_operator(self, expression: Expression) -> str:
        return self.resolve(expression.type, expression.negated, OperatorContext.RELATION)
