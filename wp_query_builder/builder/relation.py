#!/usr/bin/env python3
"""
Relation builder for the nested portions of WP_Query meta and tax queries.

A relation block takes the form::

    {
        "relation": "AND",
        0: {...},
        1: {...},
    }

Child clauses follow the relation entry under integer keys, in the order of
the expression's terms. WP_Query treats them as a list, so order matters.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from ..config import BuilderConfig
from ..exceptions import UnsupportedOperatorError
from ..expressions import Expression
from ..utils.strings import MessageTranslator, StringNormalizer
from .base import BuildResult, QueryBuilder
from .compare import MetaCompareBuilder, TaxCompareBuilder, leaf_kind
from .operators import OperatorResolver


class RelationMode(Enum):
    """Selects which leaf builder handles relational children."""
    META = "meta"
    TAX = "tax"

    @classmethod
    def from_value(cls, value: Union['RelationMode', str]) -> 'RelationMode':
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value == str(value).lower():
                return mode
        raise ValueError(f"Unknown relation mode: {value}")


class RelationBuilder(QueryBuilder):
    """
    Builds AND/OR expressions into WP_Query relation blocks.

    Logical children recurse with the same mode; relational children are
    handed to the leaf builder registered for the mode.
    """

    def __init__(self,
                 config: Optional[BuilderConfig] = None,
                 resolver: Optional[OperatorResolver] = None,
                 normalizer: Optional[StringNormalizer] = None,
                 translator: Optional[MessageTranslator] = None,
                 leaf_builders: Optional[Dict[RelationMode, QueryBuilder]] = None):
        super().__init__(config, resolver, normalizer, translator)
        self.leaf_builders = leaf_builders or {
            RelationMode.META: MetaCompareBuilder(self.config, self.resolver, self.normalizer, self.translator),
            RelationMode.TAX: TaxCompareBuilder(self.config, self.resolver, self.normalizer, self.translator),
        }

    def attempt(self, expression: Any, mode: Union[RelationMode, str] = RelationMode.META, *args) -> BuildResult:
        """
        Attempt to build a logical expression into a relation block.

        Args:
            expression: The expression to build
            mode: Whether relational children are meta or taxonomy clauses

        Returns:
            Result holding the relation block. On failure the error names the
            relation expression and chains the failure that caused it.
        """
        mode = RelationMode.from_value(mode)

        if not isinstance(expression, Expression):
            return self._fail("Expression is not a valid WP_Query relation", expression)

        try:
            relation = self.resolver.relation_operator(expression)
        except UnsupportedOperatorError as e:
            return self._fail("Expression is not a valid WP_Query relation", expression, cause=e)

        block: Dict[Any, Any] = {"relation": relation}

        for index, term in enumerate(expression.terms):
            result = self._attempt_term(term, mode)
            if not result.ok:
                self.logger.debug(f"{mode.value} relation rejected at term {index}: {result.error}")
                return self._fail(
                    "Expression is not a valid WP_Query relation",
                    expression,
                    cause=result.error
                )
            block[index] = result.value

        return BuildResult.success(block)

    def _attempt_term(self, term: Any, mode: RelationMode) -> BuildResult:
        if not isinstance(term, Expression):
            return self._fail("Relation term is not an expression", term)

        if term.is_logical():
            return self.attempt(term, mode)

        result = self.leaf_builders[mode].attempt(term)
        if not result.ok:
            self.logger.debug(f"{mode.value} compare rejected {leaf_kind(term)} expression")
        return result
