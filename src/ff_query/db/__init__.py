"""
Database connection and execution modules.
"""

from .adapters import BindAdapter, DriverBindAdapter, DriverParamType, MySQLBindAdapter
from .driver import Driver
from .mysql import MySQL
from .sql import SQL

__all__ = [
    "SQL",
    # Backends
    "Driver",
    "MySQL",
    # Bind adapters
    "BindAdapter",
    "DriverBindAdapter",
    "DriverParamType",
    "MySQLBindAdapter",
]
