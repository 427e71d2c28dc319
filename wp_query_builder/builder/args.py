#!/usr/bin/env python3
"""
Top-level builder producing complete WP_Query argument dicts.

Example usage:
    from wp_query_builder import WpQueryArgsBuilder
    from wp_query_builder.expressions import and_, or_, compare, var, meta, tax, lit

    builder = WpQueryArgsBuilder()
    args = builder.build(and_(
        compare("=", var("post_type"), lit("post")),
        or_(
            compare(">=", meta("price"), lit(10)),
            compare("exists", meta("featured")),
        ),
        and_(compare("=", tax("category"), lit("news"), negated=True)),
    ))

    # {
    #     "post_type": "post",
    #     "meta_query": {"relation": "OR", 0: {...}, 1: {...}},
    #     "tax_query": {"relation": "AND", 0: {...}},
    # }
"""

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import BuilderConfig
from ..expressions import BooleanType, Expression, type_key
from ..utils.strings import MessageTranslator, StringNormalizer
from .base import BuildResult, QueryBuilder
from .compare import CompareBuilder
from .operators import OperatorResolver
from .relation import RelationBuilder, RelationMode


@dataclass(frozen=True)
class BuildStrategy:
    """
    One way of building a top-level term.

    Attributes:
        name: Name used in log messages
        attempt: Callable returning a BuildResult for a term
        wrap: Places a successful result into the top-level arguments
    """
    name: str
    attempt: Callable[[Expression], BuildResult]
    wrap: Callable[[Dict[Any, Any]], Dict[Any, Any]]


class WpQueryArgsBuilder(QueryBuilder):
    """
    Builds an AND expression into WP_Query array arguments.

    Each term of the root expression is tried as a meta relation, then as a
    taxonomy relation, then as a plain key-value compare. The first strategy
    that succeeds decides where the term ends up. Terms producing the same
    top-level key overwrite each other in term order.
    """

    def __init__(self,
                 config: Optional[BuilderConfig] = None,
                 resolver: Optional[OperatorResolver] = None,
                 normalizer: Optional[StringNormalizer] = None,
                 translator: Optional[MessageTranslator] = None,
                 **settings):
        """
        Initialize the builder.

        Args:
            config: Builder settings
            resolver: Operator resolver
            normalizer: Value normalizer
            translator: Message renderer for error messages
            **settings: BuilderConfig fields, overriding ``config``. This lets
                the dicts returned by ``Config`` be passed as keyword arguments.
        """
        if settings:
            base = config.to_dict() if config else {}
            config = BuilderConfig.from_dict({**base, **settings})

        super().__init__(config, resolver, normalizer, translator)

        self.relation_builder = RelationBuilder(self.config, self.resolver, self.normalizer, self.translator)
        self.compare_builder = CompareBuilder(self.config, self.resolver, self.normalizer, self.translator)

        self.strategies: Tuple[BuildStrategy, ...] = (
            BuildStrategy(
                "meta_query",
                partial(self.relation_builder.attempt, mode=RelationMode.META),
                lambda block: {"meta_query": block}
            ),
            BuildStrategy(
                "tax_query",
                partial(self.relation_builder.attempt, mode=RelationMode.TAX),
                lambda block: {"tax_query": block}
            ),
            BuildStrategy(
                "compare",
                self.compare_builder.attempt,
                lambda entries: entries
            ),
        )

    def is_supported(self, expression: Any) -> bool:
        """
        Check if an expression can be the root of WP_Query arguments.

        Only the type was checked historically, so a negated AND root used to
        build as if it were not negated. It is rejected here, since WP_Query
        has no way to negate the arguments as a whole.
        """
        return (
            isinstance(expression, Expression)
            and type_key(expression.type) == BooleanType.AND.value
            and not expression.negated
        )

    def attempt(self, expression: Any, *args) -> BuildResult:
        """
        Attempt to build a root expression into WP_Query arguments.

        Args:
            expression: A non-negated AND expression

        Returns:
            Result holding the complete arguments dict. Nothing is returned on
            failure except the error.
        """
        if not self.is_supported(expression):
            return self._fail("Expression is not supported", expression)

        query: Dict[Any, Any] = {}

        for term in expression.terms:
            if not isinstance(term, Expression):
                return self._fail("Expression term is not an expression", term)

            result = self._attempt_term(term)
            if not result.ok:
                return result

            query.update(result.value)

        return BuildResult.success(query)

    def _attempt_term(self, term: Expression) -> BuildResult:
        failures = []

        for strategy in self.strategies:
            result = strategy.attempt(term)
            if result.ok:
                self.logger.debug(f"Built {term!r} as {strategy.name}")
                return BuildResult.success(strategy.wrap(result.value))

            self.logger.debug(f"{strategy.name} does not apply to {term!r}: {result.error}")
            failures.append(result.error)

        return self._fail(
            "Expression could not be built - no supported build method found",
            term,
            causes=failures
        )


def build_args(expression: Expression, **settings) -> Dict[Any, Any]:
    """
    Build an expression into WP_Query arguments with a new builder.

    Args:
        expression: A non-negated AND expression
        **settings: BuilderConfig fields

    Raises:
        UnsupportedExpressionError: If the expression cannot be built
    """
    return WpQueryArgsBuilder(**settings).build(expression)
