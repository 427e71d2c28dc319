"""
String helpers used by the builders: value normalization and message rendering.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union

from ..exceptions import InvalidValueError


class StringNormalizer:
    """
    Converts scalar-like values to their canonical string form.

    Accepted input: str, int, float, Decimal, bool, Enum members (their value
    is normalized) and any object that defines its own ``__str__``. Bytes are
    rejected rather than decoded.
    """

    def normalize(self, subject: Any) -> str:
        if isinstance(subject, Enum):
            return self.normalize(subject.value)
        if isinstance(subject, bool):
            return "1" if subject else ""
        if isinstance(subject, (str, int, float, Decimal)):
            return str(subject)
        if isinstance(subject, (bytes, bytearray)):
            # str() of bytes is their repr, not their text
            raise InvalidValueError(subject)
        if subject is not None and type(subject).__str__ is not object.__str__:
            return str(subject)
        raise InvalidValueError(subject)

    def __call__(self, subject: Any) -> str:
        return self.normalize(subject)


class MessageTranslator:
    """
    Renders message templates with placeholder arguments.

    No catalog is bundled; pass ``catalog`` to substitute templates
    (e.g. a gettext-style lookup) before formatting.
    """

    def __init__(self, catalog: Optional[Dict[str, str]] = None):
        self.catalog = dict(catalog or {})

    def translate(self,
                  string: str,
                  args: Union[Sequence[Any], Dict[str, Any], None] = None,
                  context: Any = None) -> str:
        template = self.catalog.get(string, string)
        if not args:
            return template
        if isinstance(args, dict):
            return template % args
        return template % tuple(args)

    def __call__(self, string: str, args=None, context=None) -> str:
        return self.translate(string, args, context)
