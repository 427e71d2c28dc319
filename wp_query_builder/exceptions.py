"""
Exception classes for the WP Query builder.
"""

from typing import Any, Iterable, Optional


class WpQueryBuilderError(Exception):
    """
    Base exception for all builder errors.

    Carries the offending node or term as ``subject`` and, for errors that
    summarize several failed attempts, the individual failures as ``causes``.
    The wrapped cause of a single failure is chained through ``__cause__``.
    """

    def __init__(self,
                 message: str = "",
                 code: Optional[int] = None,
                 subject: Any = None,
                 causes: Iterable[BaseException] = ()):
        super().__init__(message)
        self.message = message
        self.code = code
        self.subject = subject
        self.causes = tuple(causes)


class UnsupportedOperatorError(WpQueryBuilderError):
    """Raised when a type has no operator mapping in a resolver context."""

    def __init__(self, operator: Any, context: str, negated: bool = False, message: Optional[str] = None):
        neg = "negated " if negated else ""
        super().__init__(
            message or f"Operator {neg}'{operator}' is not supported in {context} context",
            subject=operator
        )
        self.operator = operator
        self.context = context
        self.negated = negated


class UnsupportedExpressionError(WpQueryBuilderError):
    """Raised when an expression or term does not fit the shape being built."""
    pass


class InvalidValueError(WpQueryBuilderError):
    """Raised when a value cannot be normalized to a scalar form."""

    def __init__(self, value: Any, message: Optional[str] = None):
        super().__init__(
            message or f"Value of type {type(value).__name__} cannot be normalized",
            subject=value
        )
        self.value = value


class ConfigError(WpQueryBuilderError):
    """Raised when builder configuration is malformed."""
    pass


class InvalidFilterError(WpQueryBuilderError, ValueError):
    """Raised when a filter dict is malformed or invalid."""
    pass
