"""
Query builder module for backend-agnostic SQL generation.

Provides the QueryBuilder statement builder, its operators and the tagged
bind values consumed by the database backends.
"""

from .base import QueryBuilder, StatementType
from .bind import BindKind, BindValue
from .operators import Operator

__all__ = [
    "QueryBuilder",
    "StatementType",
    "Operator",
    "BindKind",
    "BindValue",
]
