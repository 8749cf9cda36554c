"""
ff-query: Fluent SQL statement builder with interchangeable database backends.

Features:
- Chainable SELECT / INSERT / UPDATE / DELETE builder with JOIN, WHERE,
  GROUP BY, HAVING, ORDER BY, LIMIT and OFFSET clauses
- Positional ``?`` parameters collected in placeholder order
- EXISTS subqueries built from nested builders
- Two backends behind one contract: Driver (PyMySQL / sqlite3 files) and
  MySQL (mysql-connector-python prepared statements)
- Validated connection configuration from URLs, mappings, credentials or
  environment variables
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("ff-query")
except Exception:
    __version__ = "1.0.0"

# Query builder
from .query_builder import BindKind, BindValue, Operator, QueryBuilder, StatementType

# Database exports
from .db import SQL, Driver, MySQL

# Configuration
from .config import ConnectionConfig, ConnectionSettings

# Results
from .result import QueryResult, ResultStatus

# Exceptions
from .exceptions import (
    FFQueryError,
    InvalidArgumentError,
    IllegalStateError,
    ConfigurationError,
    ExecutionError,
)

__all__ = [
    # Version
    "__version__",
    # Query builder
    "QueryBuilder",
    "StatementType",
    "Operator",
    "BindKind",
    "BindValue",
    # Backends
    "SQL",
    "Driver",
    "MySQL",
    # Configuration
    "ConnectionConfig",
    "ConnectionSettings",
    # Results
    "QueryResult",
    "ResultStatus",
    # Exceptions
    "FFQueryError",
    "InvalidArgumentError",
    "IllegalStateError",
    "ConfigurationError",
    "ExecutionError",
]
