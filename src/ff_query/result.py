"""
Unified execution result shared by every backend.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import ExecutionError


class ResultStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of executing a statement.

    SUCCESS carries the fetched rows (possibly none, e.g. for an UPDATE),
    EMPTY means nothing was sent to the database, FAILURE carries the
    ExecutionError raised by the driver.
    """

    status: ResultStatus
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[ExecutionError] = None
    rowcount: int = -1

    @classmethod
    def success(cls, rows: List[Dict[str, Any]], rowcount: int = -1) -> "QueryResult":
        return cls(ResultStatus.SUCCESS, rows=list(rows), rowcount=rowcount)

    @classmethod
    def empty(cls) -> "QueryResult":
        return cls(ResultStatus.EMPTY)

    @classmethod
    def failure(cls, error: ExecutionError) -> "QueryResult":
        return cls(ResultStatus.FAILURE, error=error)

    @property
    def ok(self) -> bool:
        return self.status is not ResultStatus.FAILURE

    @property
    def failed(self) -> bool:
        return self.status is ResultStatus.FAILURE

    def unwrap(self) -> List[Dict[str, Any]]:
        """
        Return the rows, raising the stored error for a failed result.

        :raises ExecutionError: If the statement failed.
        """
        if self.error is not None:
            raise self.error
        return self.rows

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return self.ok
