"""
WP Query Builder
Builds logical expression trees into WordPress WP_Query array arguments.
"""

from .builder import (
    BuildResult,
    OperatorResolver,
    RelationBuilder,
    RelationMode,
    WpQueryArgsBuilder,
    build_args
)
from .config import BuilderConfig, Config
from .exceptions import (
    ConfigError,
    InvalidFilterError,
    InvalidValueError,
    UnsupportedExpressionError,
    UnsupportedOperatorError,
    WpQueryBuilderError
)
from .expressions import BooleanType, Expression, RelationalType
from .parser import FilterParser

__version__ = "0.1.0"

__all__ = [
    "WpQueryArgsBuilder",
    "RelationBuilder",
    "RelationMode",
    "OperatorResolver",
    "BuildResult",
    "build_args",
    "BuilderConfig",
    "Config",
    "FilterParser",
    "Expression",
    "BooleanType",
    "RelationalType",
    "WpQueryBuilderError",
    "UnsupportedOperatorError",
    "UnsupportedExpressionError",
    "InvalidValueError",
    "InvalidFilterError",
    "ConfigError"
]
