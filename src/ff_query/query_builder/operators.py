"""
Comparison and membership operators for WHERE / HAVING conditions.

Each operator turns a (column, value) pair into a SQL fragment with positional
``?`` placeholders plus the ordered values those placeholders consume.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, List, Tuple, Union

from ..exceptions import InvalidArgumentError


def _is_list_like(value: Any) -> bool:
    """True for ordered, non-mapping, non-string sequences."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray, Mapping))


def placeholders(count: int) -> str:
    """Return ``count`` comma separated ``?`` placeholders."""
    return ",".join("?" * count)


class Operator(str, Enum):
    """Operators accepted by QueryBuilder.where() and QueryBuilder.having()."""

    EQ = "="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    NOT = "<>"
    BETWEEN = "BETWEEN"
    LIKE = "LIKE"
    IN = "IN"
    EXISTS = "EXISTS"

    @classmethod
    def coerce(cls, op: Union["Operator", str]) -> "Operator":
        """
        Resolve an Operator from an enum member or its symbol / keyword.

        Args:
            op: Operator member, symbol ("=", "<>") or keyword ("in", "LIKE")

        Returns:
            Matching Operator

        Raises:
            InvalidArgumentError: If the operator is not recognised
        """
        if isinstance(op, cls):
            return op
        if isinstance(op, str):
            try:
                return cls(op.strip().upper())
            except ValueError:
                pass
        raise InvalidArgumentError(f"Operator not valid: {op!r}")

    def parse(self, column: str, value: Any) -> Tuple[str, List[Any]]:
        """
        Build the condition fragment for this operator.

        Args:
            column: Column (or expression) on the left-hand side
            value: Scalar, sequence (BETWEEN / IN) or QueryBuilder (EXISTS)

        Returns:
            Tuple of (fragment, consumed_values)

        Raises:
            InvalidArgumentError: If the value does not fit the operator
        """
        if self in (Operator.BETWEEN, Operator.IN) and not _is_list_like(value):
            raise InvalidArgumentError(f"{self.value} operator needs the value to be a sequence")

        if self is Operator.BETWEEN:
            if len(value) != 2:
                raise InvalidArgumentError("BETWEEN operator needs exactly two values")
            return f"{column} {self.value} ? AND ?", list(value)

        if self is Operator.IN:
            if len(value) == 0:
                raise InvalidArgumentError("IN operator needs at least one value")
            return f"{column} {self.value} ({placeholders(len(value))})", list(value)

        if self is Operator.EXISTS:
            from .base import QueryBuilder

            if not isinstance(value, QueryBuilder):
                raise InvalidArgumentError("EXISTS operator needs a QueryBuilder subquery")
            return f"{self.value} ({value.to_sql()})", list(value.values)

        return f"{column} {self.value} ?", [value]
