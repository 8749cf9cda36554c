"""
MySQL backend using mysql-connector-python prepared statements.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import mysql.connector

from .adapters import BindAdapter, MySQLBindAdapter
from .sql import SQL


@dataclass
class MySQL(SQL):
    """
    Direct MySQL connection with server-side prepared statements.

    Values are tagged with single-character type codes (i, d, s); the
    statement is bound in one call, or not at all when it has no values.

    :param config: Connection details.
    """

    db_type = "mysql"
    driver_errors = (mysql.connector.Error,)

    @property
    def adapter(self) -> BindAdapter:
        return MySQLBindAdapter()

    def connect(self) -> None:
        """
        Establish a direct connection to the MySQL database.

        :raises mysql.connector.Error: If connecting fails.
        """
        if self.connection is not None:
            return  # Connection is already established

        config = self.config
        try:
            self.connection = mysql.connector.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password.get_secret_value(),
                database=config.database or None,
                autocommit=True,
            )
            self.logger.info(
                f"Connected to MySQL database: {config.database} at {config.host}:{config.port}"
            )
        except mysql.connector.Error as e:
            self.logger.error(f"Failed to connect to MySQL: {e}")
            raise

    def close(self) -> None:
        """Close the connection; the next execute() reconnects."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            self.logger.debug("Closed MySQL connection")

    def _run(
        self, query: str, tags: Sequence[Any], params: Sequence[Any]
    ) -> Tuple[List[Dict[str, Any]], int]:
        cursor = self.connection.cursor(prepared=True, dictionary=True)
        try:
            if params:
                self.logger.debug(f"Binding parameters with types '{''.join(tags)}'")
                cursor.execute(query, tuple(params))
            else:
                cursor.execute(query)

            rows = cursor.fetchall() if cursor.description else []
            return [dict(row) for row in rows], cursor.rowcount
        finally:
            cursor.close()
