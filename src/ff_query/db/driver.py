"""
Generic driver backend.

Connects to a MySQL server through PyMySQL, or to a database file through
sqlite3 when created with Driver.file() / a sqlite configuration.
"""

import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import pymysql
from pymysql.cursors import DictCursor

from .adapters import BindAdapter, DriverBindAdapter
from .sql import SQL


@dataclass
class Driver(SQL):
    """
    Backend using DB-API drivers with per-value parameter types.

    Values are tagged STR / INT / BOOL / NULL and coerced accordingly before
    binding. Rows are returned as column -> value dicts.

    :param config: Connection details (driver "mysql" or "sqlite").
    """

    db_type = "driver"
    supports_file = True
    driver_errors = (pymysql.MySQLError, sqlite3.Error)

    @property
    def adapter(self) -> BindAdapter:
        if self.config.is_file_based:
            return DriverBindAdapter(param_style="qmark")
        return DriverBindAdapter(param_style="format")

    def connect(self) -> None:
        """
        Establish the connection.

        :raises pymysql.MySQLError: If the MySQL server cannot be reached.
        :raises sqlite3.Error: If the database file cannot be opened.
        """
        if self.connection is not None:
            return  # Connection is already established

        config = self.config
        try:
            if config.is_file_based:
                # isolation_level=None keeps sqlite3 in autocommit mode
                self.connection = sqlite3.connect(config.database, isolation_level=None)
                self.connection.row_factory = sqlite3.Row
                self.logger.info(f"Connected to database file: {config.database}")
            else:
                self.connection = pymysql.connect(
                    host=config.host,
                    port=config.port,
                    user=config.user,
                    password=config.password.get_secret_value(),
                    database=config.database or None,
                    cursorclass=DictCursor,
                    autocommit=True,
                )
                self.logger.info(
                    f"Connected to MySQL database: {config.database} at {config.host}:{config.port}"
                )
        except self.driver_errors as e:
            self.logger.error(f"Failed to connect: {e}")
            raise

    def close(self) -> None:
        """Close the connection; the next execute() reconnects."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            self.logger.debug("Closed database connection")

    def _run(
        self, query: str, tags: Sequence[Any], params: Sequence[Any]
    ) -> Tuple[List[Dict[str, Any]], int]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, list(params))
            rows = cursor.fetchall() if cursor.description else []
            return [dict(row) for row in rows], cursor.rowcount
        finally:
            cursor.close()
