#!/usr/bin/env python3
"""
MongoDB-style filter parser.

Turns filter dicts into expression trees that the WP_Query builders accept.
Field names prefixed with the meta or taxonomy entity (``meta.price``,
``tax.category``) become entity fields; any other name is a plain query
variable. For example::

    {
        "post_type": "product",
        "$or": [
            {"meta.price": {"$lt": 10}},
            {"meta.on_sale": True}
        ],
        "$and": [
            {"tax.product_cat": {"$in": ["shoes", "boots"]}}
        ]
    }

parses to ``and(=(post_type, 'product'), or(...), and(in(tax.product_cat, ...)))``.
Meta and taxonomy conditions go inside ``$and`` or ``$or`` lists, since
WP_Query only accepts them as part of a relation.
"""

from dataclasses import replace
from typing import Any, Dict, List, Optional

from .config import BuilderConfig
from .exceptions import InvalidFilterError
from .expressions import (
    BooleanType, EntityFieldTerm, Expression, LiteralTerm, RelationalType,
    Term, VariableTerm
)


FIELD_OPERATORS = {
    "$eq": RelationalType.EQUAL_TO,
    "$ne": RelationalType.NOT_EQUAL_TO,
    "$gt": RelationalType.GREATER_THAN,
    "$gte": RelationalType.GREATER_EQUAL_TO,
    "$lt": RelationalType.LESS_THAN,
    "$lte": RelationalType.LESS_EQUAL_TO,
    "$in": RelationalType.IN,
    "$nin": RelationalType.NOT_IN,
    "$like": RelationalType.LIKE,
    "$between": RelationalType.BETWEEN,
    "$exists": RelationalType.EXISTS,
    "$regex": RelationalType.REGEXP,
    "$all": RelationalType.ALL,
}

LOGICAL_OPERATORS = {
    "$and": BooleanType.AND,
    "$or": BooleanType.OR,
}

NOT_OPERATOR = "$not"


class FilterParser:
    """
    Parses MongoDB-style filter dictionaries into expression trees.

    The root of a parsed filter is always an AND expression. Below the root,
    a dict holding a single condition parses to that condition; a dict
    holding several parses to an AND over them.
    """

    def __init__(self, max_depth: int = 10, config: Optional[BuilderConfig] = None):
        """
        Initialize the parser.

        Args:
            max_depth: Maximum nesting depth
            config: Builder settings providing the meta and taxonomy entity names
        """
        self.max_depth = max_depth
        self.config = config or BuilderConfig()
        self._depth = 0

    def parse(self, filters: Dict[str, Any]) -> Expression:
        """
        Parse MongoDB-style filters into an expression tree.

        Args:
            filters: MongoDB-style filter dictionary

        Returns:
            Expression tree with an AND root

        Raises:
            InvalidFilterError: If the filter is invalid or too deeply nested
        """
        if not filters:
            return Expression(BooleanType.AND, ())
        if not isinstance(filters, dict):
            raise InvalidFilterError("Filters must be a dictionary", subject=filters)

        self._depth = 0
        terms = self._parse_terms(filters)
        return Expression(BooleanType.AND, terms)

    def _parse_dict(self, filters: Dict[str, Any]) -> Expression:
        """Parse a nested dictionary of filters into a single expression."""
        terms = self._parse_terms(filters)

        if len(terms) == 1:
            return terms[0]
        return Expression(BooleanType.AND, terms)

    def _parse_terms(self, filters: Dict[str, Any]) -> List[Expression]:
        self._depth += 1
        if self._depth > self.max_depth:
            raise InvalidFilterError(f"Filter nesting exceeds maximum depth of {self.max_depth}")

        try:
            terms: List[Expression] = []

            for key, value in filters.items():
                if key in LOGICAL_OPERATORS:
                    terms.append(self._parse_logical(LOGICAL_OPERATORS[key], key, value))
                elif key == NOT_OPERATOR:
                    if not isinstance(value, dict):
                        raise InvalidFilterError(f"{key} requires a dictionary", subject=value)
                    terms.append(self._negate(self._parse_dict(value)))
                elif key.startswith('$'):
                    if key in FIELD_OPERATORS:
                        raise InvalidFilterError(f"Operator {key} requires a field")
                    raise InvalidFilterError(f"Unknown operator: {key}")
                else:
                    terms.extend(self._parse_field(key, value))

            return terms

        finally:
            self._depth -= 1

    def _parse_logical(self, operator: BooleanType, key: str, value: Any) -> Expression:
        """Parse logical operators ($and, $or)."""
        if not isinstance(value, list):
            raise InvalidFilterError(f"{key} requires a list", subject=value)

        children = []
        for item in value:
            if not isinstance(item, dict):
                raise InvalidFilterError(f"{key} items must be dictionaries", subject=item)
            children.append(self._parse_dict(item))

        return Expression(operator, children)

    def _parse_field(self, key: str, value: Any, negated: bool = False) -> List[Expression]:
        """Parse field-level conditions."""
        operand = self._field_term(key)

        if not (isinstance(value, dict) and any(k.startswith('$') for k in value)):
            # Direct equality
            return [Expression(RelationalType.EQUAL_TO, (operand, LiteralTerm(value)), negated)]

        conditions = []
        for op_str, op_value in value.items():
            if op_str == NOT_OPERATOR:
                if not isinstance(op_value, dict):
                    raise InvalidFilterError(f"{op_str} requires a dictionary", subject=op_value)

                self._depth += 1
                if self._depth > self.max_depth:
                    raise InvalidFilterError(f"Filter nesting exceeds maximum depth of {self.max_depth}")
                try:
                    conditions.extend(self._parse_field(key, op_value, not negated))
                finally:
                    self._depth -= 1
                continue

            op = FIELD_OPERATORS.get(op_str)
            if op is None:
                raise InvalidFilterError(f"Unknown operator: {op_str}")

            if op is RelationalType.EXISTS:
                # {"$exists": False} is a negated existence check with no value
                exists = Expression(op, (operand,), negated)
                conditions.append(exists if op_value else replace(exists, negated=not negated))
            else:
                conditions.append(Expression(op, (operand, LiteralTerm(op_value)), negated))

        return conditions

    def _field_term(self, key: str) -> Term:
        entity, sep, name = key.partition('.')
        if sep and name and entity in (self.config.meta_entity, self.config.tax_entity):
            return EntityFieldTerm(entity, name)
        return VariableTerm(key)

    def _negate(self, expression: Expression) -> Expression:
        """
        Negate a parsed expression.

        Single-condition wrappers pass the negation down to the condition, as
        WP_Query relations themselves cannot be negated.
        """
        if expression.is_logical() and len(expression.terms) == 1 and isinstance(expression.terms[0], Expression):
            return replace(expression, terms=(self._negate(expression.terms[0]),))
        return replace(expression, negated=not expression.negated)
