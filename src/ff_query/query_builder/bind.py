"""
Tagged bind values.

Every raw value accumulated by a QueryBuilder is classified exactly once into a
BindValue. Backends map the BindKind onto their own parameter type codes, so
both of them agree on what a value is.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class BindKind(str, Enum):
    """Closed set of value kinds a statement parameter can carry."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"


@dataclass(frozen=True)
class BindValue:
    """A raw parameter value together with its kind."""

    value: Any
    kind: BindKind

    @classmethod
    def of(cls, value: Any) -> "BindValue":
        """
        Classify a raw value.

        bool is checked before int because bool is an int subclass.
        Numeric strings are kept as strings.
        """
        if isinstance(value, BindValue):
            return value
        if value is None:
            return cls(None, BindKind.NULL)
        if isinstance(value, bool):
            return cls(value, BindKind.BOOLEAN)
        if isinstance(value, int):
            return cls(value, BindKind.INTEGER)
        if isinstance(value, (float, Decimal)):
            return cls(value, BindKind.DOUBLE)
        return cls(value, BindKind.STRING)

    @property
    def is_null(self) -> bool:
        return self.kind is BindKind.NULL
