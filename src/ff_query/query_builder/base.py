"""
Fluent SQL statement builder.

A QueryBuilder accumulates one statement (SELECT, INSERT, UPDATE or DELETE),
its clauses and the ordered values for its ``?`` placeholders, and renders the
SQL text on demand. Identifiers are emitted as given; value safety comes only
from positional parameter binding at execution time.

Usage:
    qb = (
        QueryBuilder()
        .select("users", ["id", "name"])
        .join("LEFT", "orders", {"users.id": "orders.user_id"})
        .where("age", ">=", 18)
        .where("status", Operator.IN, ["active", "trial"])
        .order("name")
        .limit(10)
    )
    qb.to_sql()
    # SELECT id,name FROM users LEFT JOIN orders ON users.id=orders.user_id
    #   WHERE age >= ? AND status IN (?,?) ORDER BY name ASC LIMIT 10
    qb.values  # [18, "active", "trial"]
"""

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple, Union

from ..exceptions import IllegalStateError, InvalidArgumentError
from .bind import BindValue
from .operators import Operator, placeholders

if TYPE_CHECKING:
    from ..db.sql import SQL
    from ..result import QueryResult

JOIN_TYPES = ("INNER", "FULL", "LEFT", "RIGHT")
GLUE_TOKENS = ("AND", "OR")
ORDER_DIRECTIONS = ("ASC", "DESC")


class StatementType(str, Enum):
    """Kind of statement a builder represents."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class QueryBuilder:
    """
    Stateful builder for a single SQL statement.

    Shaping methods (select, insert, update, delete) set the statement kind and
    may be called once per builder; clause methods (join, where, having, group,
    order, limit, offset) can be chained in any order and are always rendered
    in SQL clause order.
    """

    def __init__(self, executor: Optional["SQL"] = None):
        """
        Initialize an empty builder.

        Args:
            executor: Optional backend used by execute()
        """
        self._executor = executor
        self.reset()

    def reset(self) -> "QueryBuilder":
        """Discard the statement, its clauses and its values."""
        self.kind: Optional[StatementType] = None
        self.table: str = ""
        self.columns: Union[List[str], Dict[str, Any]] = []
        self.is_column_mapping: bool = False

        # (fragment, glue, consumed values)
        self._joins: List[str] = []
        self._where: List[Tuple[str, str, List[Any]]] = []
        self._group: List[str] = []
        self._having: List[Tuple[str, str, List[Any]]] = []
        self._order: List[str] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        return self

    # ==================== Statements ====================

    def select(self, table: str, columns: Iterable[str] = ("*",)) -> "QueryBuilder":
        """
        Start a SELECT statement.

        Args:
            table: Table to select from; an empty name omits the FROM clause
            columns: Column names or expressions (default: *)

        Raises:
            InvalidArgumentError: If columns is a mapping or empty
        """
        if isinstance(columns, Mapping):
            raise InvalidArgumentError("SELECT columns do not accept a mapping")
        names = self._column_list(columns)

        self._start(StatementType.SELECT, table)
        self.columns = names
        return self

    def insert(self, table: str, columns: Union[Mapping, Iterable[str]]) -> "QueryBuilder":
        """
        Start an INSERT statement.

        A mapping supplies both column names and values (VALUES clause is
        rendered). A plain list only names the columns; values are supplied
        by the caller, e.g. through a following SELECT.

        Args:
            table: Target table
            columns: Mapping of column -> value, or list of column names
        """
        if isinstance(columns, Mapping):
            mapping = self._column_mapping(columns)
            self._start(StatementType.INSERT, table)
            self._set_mapping(mapping)
        else:
            names = self._column_list(columns)
            self._start(StatementType.INSERT, table)
            self.columns = names
        return self

    def update(self, table: str, columns: Mapping) -> "QueryBuilder":
        """
        Start an UPDATE statement.

        Args:
            table: Target table
            columns: Mapping of column -> new value

        Raises:
            InvalidArgumentError: If columns is not a mapping
        """
        if not isinstance(columns, Mapping):
            raise InvalidArgumentError("UPDATE columns must contain key and value")
        mapping = self._column_mapping(columns)

        self._start(StatementType.UPDATE, table)
        self._set_mapping(mapping)
        return self

    def delete(self, table: str) -> "QueryBuilder":
        """Start a DELETE statement."""
        self._start(StatementType.DELETE, table)
        return self

    # ==================== Clauses ====================

    def join(self, join_type: str, table: str, on: Mapping) -> "QueryBuilder":
        """
        Combine rows from another table.

        Args:
            join_type: INNER, FULL, LEFT or RIGHT
            table: Table to join
            on: Mapping of left column -> right column equalities

        Raises:
            InvalidArgumentError: If join_type is unknown or on is not a non-empty mapping
        """
        if join_type not in JOIN_TYPES:
            raise InvalidArgumentError(f"Unrecognized join type: {join_type!r}")
        if not isinstance(on, Mapping) or not on:
            raise InvalidArgumentError("JOIN condition needs a mapping of column pairs")

        condition = " AND ".join(f"{left}={right}" for left, right in on.items())
        self._joins.append(f"{join_type} JOIN {table} ON {condition}")
        return self

    def where(
        self, column: str, op: Union[Operator, str], value: Any, glue: str = "AND"
    ) -> "QueryBuilder":
        """
        Filter rows by a condition.

        Args:
            column: Column or expression
            op: Operator member or its symbol / keyword
            value: Value(s) for the operator, or a QueryBuilder for EXISTS
            glue: AND / OR joining this condition to the next one
        """
        self._where.append(self._condition(column, op, value, glue))
        return self

    def having(
        self, column: str, op: Union[Operator, str], value: Any, glue: str = "AND"
    ) -> "QueryBuilder":
        """Filter grouped rows by a condition (aggregates allowed)."""
        self._having.append(self._condition(column, op, value, glue))
        return self

    def group(self, *columns: str) -> "QueryBuilder":
        """Group rows sharing the same values in the given columns."""
        self._group.extend(columns)
        return self

    def order(self, column: str, direction: str = "ASC") -> "QueryBuilder":
        """
        Order rows by a column.

        Raises:
            InvalidArgumentError: If direction is not ASC or DESC
        """
        direction = str(direction).upper()
        if direction not in ORDER_DIRECTIONS:
            raise InvalidArgumentError(f"Order direction must be ASC or DESC, got {direction!r}")
        self._order.append(f"{column} {direction}")
        return self

    def limit(self, length: int) -> "QueryBuilder":
        """Limit the number of returned rows (replaces a previous limit)."""
        self._limit = self._non_negative("LIMIT", length)
        return self

    def offset(self, offset: int) -> "QueryBuilder":
        """Skip the given number of rows (replaces a previous offset)."""
        self._offset = self._non_negative("OFFSET", offset)
        return self

    # ==================== Rendering ====================

    @property
    def values(self) -> List[Any]:
        """
        Raw values for the rendered placeholders.

        Collected in render order (SET / VALUES, WHERE, HAVING) so the list
        always lines up with the ``?`` tokens of to_sql(), whatever order
        where() and having() were called in.
        """
        values = list(self.columns.values()) if self.is_column_mapping else []
        for conditions in (self._where, self._having):
            for _fragment, _glue, consumed in conditions:
                values.extend(consumed)
        return values

    @property
    def params(self) -> Tuple[Any, ...]:
        """Values for the rendered placeholders, in order."""
        return tuple(self.values)

    def bind_values(self) -> List[BindValue]:
        """Values for the rendered placeholders, classified for binding."""
        return [BindValue.of(value) for value in self.values]

    def to_sql(self) -> str:
        """
        Render the statement.

        Clauses are emitted in the order JOIN, WHERE, GROUP BY, HAVING,
        ORDER BY, LIMIT, OFFSET. Rendering does not modify the builder.

        Returns:
            SQL text with ``?`` placeholders, or "" if no statement was started
        """
        query_parts = []

        head = self._render_head()
        if head:
            query_parts.append(head)

        if self._joins:
            query_parts.append(" ".join(self._joins))
        if self._where:
            query_parts.append(f"WHERE {self._render_conditions(self._where)}")
        if self._group:
            query_parts.append(f"GROUP BY {','.join(self._group)}")
        if self._having:
            query_parts.append(f"HAVING {self._render_conditions(self._having)}")
        if self._order:
            query_parts.append(f"ORDER BY {','.join(self._order)}")
        if self._limit is not None:
            query_parts.append(f"LIMIT {self._limit}")
        if self._offset is not None:
            query_parts.append(f"OFFSET {self._offset}")

        return " ".join(query_parts).strip()

    def execute(self) -> "QueryResult":
        """
        Execute this statement on the backend that created the builder.

        Raises:
            IllegalStateError: If the builder is not bound to a backend
        """
        if self._executor is None:
            raise IllegalStateError(
                "QueryBuilder is not bound to a database; use db.query() or db.execute(builder)"
            )
        return self._executor.execute(self)

    def __str__(self) -> str:
        return self.to_sql()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(sql={self.to_sql()!r}, values={self.values!r})"

    # ==================== Helpers ====================

    def _start(self, kind: StatementType, table: str) -> None:
        if self.kind is not None:
            raise IllegalStateError(
                f"Builder already holds a {self.kind.value} statement; call reset() first"
            )
        self.kind = kind
        self.table = table

    def _set_mapping(self, mapping: Dict[str, Any]) -> None:
        self.columns = mapping
        self.is_column_mapping = True

    @staticmethod
    def _column_list(columns: Iterable[str]) -> List[str]:
        names = [columns] if isinstance(columns, str) else list(columns)
        if not names:
            raise InvalidArgumentError("Statement needs at least one column")
        return names

    @staticmethod
    def _column_mapping(columns: Mapping) -> Dict[str, Any]:
        if not columns:
            raise InvalidArgumentError("Statement needs at least one column")
        return dict(columns)

    def _condition(
        self, column: str, op: Union[Operator, str], value: Any, glue: str
    ) -> Tuple[str, str, List[Any]]:
        glue = str(glue).strip().upper()
        if glue not in GLUE_TOKENS:
            raise InvalidArgumentError(f"Condition glue must be AND or OR, got {glue!r}")

        fragment, consumed = Operator.coerce(op).parse(column, value)
        return fragment, glue, consumed

    @staticmethod
    def _render_conditions(conditions: List[Tuple[str, str, List[Any]]]) -> str:
        # The glue of the last condition has nothing to join and is dropped
        parts = []
        for index, (fragment, glue, _consumed) in enumerate(conditions):
            parts.append(fragment)
            if index < len(conditions) - 1:
                parts.append(glue)
        return " ".join(parts)

    @staticmethod
    def _non_negative(clause: str, number: int) -> int:
        if isinstance(number, bool) or not isinstance(number, int) or number < 0:
            raise InvalidArgumentError(f"{clause} needs a non-negative integer, got {number!r}")
        return number

    def _render_head(self) -> str:
        table = self.table

        if self.kind is StatementType.SELECT:
            query = f"SELECT {','.join(self.columns)}"
            if table:
                query += f" FROM {table}"
            return query

        if self.kind is StatementType.INSERT:
            if self.is_column_mapping:
                keys = list(self.columns)
                return f"INSERT INTO {table}({','.join(keys)}) VALUES({placeholders(len(keys))})"
            return f"INSERT INTO {table}({','.join(self.columns)})"

        if self.kind is StatementType.UPDATE:
            assignments = ",".join(f"{key}=?" for key in self.columns)
            return f"UPDATE {table} SET {assignments}"

        if self.kind is StatementType.DELETE:
            return f"DELETE FROM {table}"

        return ""
