#!/usr/bin/env python3
"""
Expression tree consumed by the WP_Query builders.

Expressions are either logical (AND/OR over child expressions) or relational
(a comparison over operand terms). The builders only read these nodes; they
never modify them.
"""

from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Optional, Tuple, Union


class BooleanType(Enum):
    """Logical combinator types."""
    AND = "and"
    OR = "or"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid boolean type."""
        return value in {t.value for t in cls}

    @classmethod
    def from_string(cls, value: str) -> Optional['BooleanType']:
        """Convert string to boolean type."""
        for t in cls:
            if t.value == value:
                return t
        return None


class RelationalType(Enum):
    """Comparison types."""
    EQUAL_TO = "="
    NOT_EQUAL_TO = "!="
    GREATER_THAN = ">"
    GREATER_EQUAL_TO = ">="
    LESS_THAN = "<"
    LESS_EQUAL_TO = "<="

    LIKE = "like"
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"
    EXISTS = "exists"
    REGEXP = "regexp"

    # Every listed value must match
    ALL = "all"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid relational type."""
        return value in {t.value for t in cls}

    @classmethod
    def from_string(cls, value: str) -> Optional['RelationalType']:
        """Convert string to relational type."""
        for t in cls:
            if t.value == value:
                return t
        return None


class ExpressionKind(Enum):
    LOGICAL = "logical"
    RELATIONAL = "relational"


def type_key(expr_type: Any) -> str:
    """Lookup key for an expression type: enum value or raw string, lowercased."""
    if isinstance(expr_type, Enum):
        expr_type = expr_type.value
    return str(expr_type).strip().lower()


# Terms

@dataclass(frozen=True)
class LiteralTerm:
    """A literal value operand."""
    value: Any

    def __repr__(self):
        return f"lit({self.value!r})"


@dataclass(frozen=True)
class VariableTerm:
    """A plain top-level query variable, e.g. ``post_type`` or ``author``."""
    key: str

    def __repr__(self):
        return f"var({self.key})"


@dataclass(frozen=True)
class EntityFieldTerm:
    """
    A field that belongs to an entity.

    The entity selects the kind of comparison (post meta, taxonomy, ...);
    the field is the meta key or the taxonomy name.
    """
    entity: str
    field: str

    def __repr__(self):
        return f"{self.entity}.{self.field}"


Term = Union['Expression', LiteralTerm, VariableTerm, EntityFieldTerm]


@dataclass(frozen=True)
class Expression:
    """
    A node of the expression tree.

    ``type`` is a BooleanType, a RelationalType or a raw type string. Unknown
    strings are accepted here and rejected when building.
    """
    type: Any
    terms: Tuple[Term, ...] = dc_field(default_factory=tuple)
    negated: bool = False

    def __post_init__(self):
        # Freeze list input so the tree cannot be changed after construction
        if not isinstance(self.terms, tuple):
            object.__setattr__(self, 'terms', tuple(self.terms))

    @property
    def kind(self) -> ExpressionKind:
        if BooleanType.is_valid(type_key(self.type)):
            return ExpressionKind.LOGICAL
        return ExpressionKind.RELATIONAL

    def is_logical(self) -> bool:
        """Check if this is a logical (AND/OR) expression."""
        return self.kind is ExpressionKind.LOGICAL

    def __repr__(self):
        neg = "NOT " if self.negated else ""
        return f"{neg}{type_key(self.type)}({', '.join(repr(t) for t in self.terms)})"


# Construction helpers

def and_(*terms: Term, negated: bool = False) -> Expression:
    return Expression(BooleanType.AND, terms, negated)


def or_(*terms: Term, negated: bool = False) -> Expression:
    return Expression(BooleanType.OR, terms, negated)


def compare(expr_type: Any, *terms: Term, negated: bool = False) -> Expression:
    return Expression(expr_type, terms, negated)


def var(key: str) -> VariableTerm:
    return VariableTerm(key)


def meta(key: str) -> EntityFieldTerm:
    return EntityFieldTerm("meta", key)


def tax(taxonomy: str) -> EntityFieldTerm:
    return EntityFieldTerm("tax", taxonomy)


def lit(value: Any) -> LiteralTerm:
    if isinstance(value, list):
        value = tuple(value)
    return LiteralTerm(value)


def is_sequence_value(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def as_list(value: Any) -> list:
    return list(value) if is_sequence_value(value) else [value]


__all__ = [
    'BooleanType', 'RelationalType', 'ExpressionKind', 'Expression',
    'LiteralTerm', 'VariableTerm', 'EntityFieldTerm', 'Term',
    'and_', 'or_', 'compare', 'var', 'meta', 'tax', 'lit',
    'type_key', 'is_sequence_value', 'as_list'
]
