#!/usr/bin/env python3
"""
Shared pieces of the WP_Query builders.

Builders expose two entry points: ``attempt()`` returns a BuildResult that is
either a success carrying the built arguments or a failure carrying the error,
and ``build()`` unwraps that result, raising the error on failure. Fallback
between strategies works on results, so no exception unwinding is needed to
move on to the next strategy.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..config import BuilderConfig
from ..exceptions import InvalidValueError, UnsupportedExpressionError, WpQueryBuilderError
from ..expressions import Expression, is_sequence_value
from ..utils.strings import MessageTranslator, StringNormalizer
from .operators import OperatorResolver


WP_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
WP_DATE_FORMAT = "%Y-%m-%d"
WP_TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a build attempt."""
    value: Optional[Dict[Any, Any]] = None
    error: Optional[WpQueryBuilderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Dict[Any, Any]) -> 'BuildResult':
        return cls(value=value)

    @classmethod
    def failure(cls, error: WpQueryBuilderError) -> 'BuildResult':
        return cls(error=error)

    def unwrap(self) -> Dict[Any, Any]:
        if self.error is not None:
            raise self.error
        return self.value


class QueryBuilder(ABC):
    """
    Abstract base class for WP_Query argument builders.
    """

    def __init__(self,
                 config: Optional[BuilderConfig] = None,
                 resolver: Optional[OperatorResolver] = None,
                 normalizer: Optional[StringNormalizer] = None,
                 translator: Optional[MessageTranslator] = None):
        """
        Initialize the builder.

        Args:
            config: Builder settings
            resolver: Operator resolver
            normalizer: Value normalizer
            translator: Message renderer for error messages
        """
        self.config = config or BuilderConfig()
        self.normalizer = normalizer or StringNormalizer()
        self.resolver = resolver or OperatorResolver(self.normalizer)
        self.translator = translator or MessageTranslator()
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def attempt(self, expression: Any, *args) -> BuildResult:
        """
        Attempt to build an expression without raising.

        Returns:
            A successful result with the built arguments, or a failed result
            with the error explaining why the expression does not fit
        """
        pass

    def build(self, expression: Any, *args) -> Dict[Any, Any]:
        """
        Build an expression.

        Raises:
            WpQueryBuilderError: If the expression cannot be built
        """
        return self.attempt(expression, *args).unwrap()

    def _error(self,
               message: str,
               subject: Any,
               cause: Optional[BaseException] = None,
               causes: Iterable[BaseException] = (),
               args: Any = None) -> UnsupportedExpressionError:
        """Create an unsupported-expression error with a rendered message."""
        error = UnsupportedExpressionError(
            self.translator.translate(message, args),
            subject=subject,
            causes=causes
        )
        if cause is not None:
            error.__cause__ = cause
        return error

    def _fail(self, message: str, subject: Any, cause: Optional[BaseException] = None,
              causes: Iterable[BaseException] = (), args: Any = None) -> BuildResult:
        return BuildResult.failure(self._error(message, subject, cause, causes, args))

    @staticmethod
    def _is_relational(expression: Any) -> bool:
        return isinstance(expression, Expression) and not expression.is_logical()

    def _scalar(self, value: Any) -> Any:
        """
        Normalize a single value to a form WP_Query accepts.

        Strings and numbers are kept as they are, enums give their value and
        dates are formatted the way WordPress stores them.

        Raises:
            InvalidValueError: If the value is not scalar-like
        """
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, datetime):
            return value.strftime(WP_DATETIME_FORMAT)
        if isinstance(value, date):
            return value.strftime(WP_DATE_FORMAT)
        if isinstance(value, time):
            return value.strftime(WP_TIME_FORMAT)
        if isinstance(value, (str, int, float, Decimal)):
            return value
        # Anything else must at least have a string form
        return self.normalizer.normalize(value)

    def _normalize_value(self, value: Any) -> Any:
        """
        Normalize a scalar, or each element of a list or tuple.

        Lists and tuples come back as lists; scalars come back as scalars.
        """
        if is_sequence_value(value):
            return [self._scalar(v) for v in value]
        if isinstance(value, (dict, set, frozenset)):
            raise InvalidValueError(value)
        return self._scalar(value)
