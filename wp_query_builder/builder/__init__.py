"""
Builders converting expression trees into WP_Query array arguments.

Example usage:
    from wp_query_builder.builder import WpQueryArgsBuilder, RelationBuilder, RelationMode

    # Full WP_Query arguments from an AND expression
    args = WpQueryArgsBuilder().build(expression)

    # Only a taxonomy relation block
    block = RelationBuilder().build(or_expression, RelationMode.TAX)
"""

from .base import BuildResult, QueryBuilder
from .operators import OperatorContext, OperatorResolver
from .compare import CompareBuilder, MetaCompareBuilder, TaxCompareBuilder
from .relation import RelationBuilder, RelationMode
from .args import BuildStrategy, WpQueryArgsBuilder, build_args

__all__ = [
    # Core classes
    'BuildResult',
    'QueryBuilder',
    'OperatorContext',
    'OperatorResolver',

    # Leaf builders
    'CompareBuilder',
    'MetaCompareBuilder',
    'TaxCompareBuilder',

    # Relations and top-level arguments
    'RelationBuilder',
    'RelationMode',
    'BuildStrategy',
    'WpQueryArgsBuilder',
    'build_args'
]
