"""
Base class for database backends.

A backend owns connection details and one live connection, and executes
QueryBuilder statements with positional parameter binding. Concrete backends
supply connect(), close() and _run(); the execution flow is shared.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from ..config import DEFAULT_HOST, DEFAULT_PORT, ConnectionConfig, ConnectionSettings
from ..exceptions import ConfigurationError, ExecutionError, IllegalStateError
from ..query_builder import QueryBuilder
from ..result import QueryResult
from .adapters import BindAdapter

S = TypeVar("S", bound="SQL")


@dataclass
class SQL(ABC):
    """
    Abstract database backend.

    Lifecycle: unconnected -> connected (connect(), or the first execute())
    -> closed (close()). A closed backend reconnects on its next execute().

    :param config: Connection details.
    :param connection: Live connection handle, opened lazily.
    :param logger: Logger instance (default: ff_query.db.<db_type>).
    """

    config: ConnectionConfig = field(default_factory=ConnectionConfig)
    connection: Optional[Any] = field(default=None, repr=False)
    logger: Optional[logging.Logger] = field(default=None, repr=False, compare=False)

    db_type: ClassVar[str] = "sql"
    supports_file: ClassVar[bool] = False
    driver_errors: ClassVar[Tuple[Type[BaseException], ...]] = ()

    def __post_init__(self):
        if self.logger is None:
            self.logger = logging.getLogger(f"ff_query.db.{self.db_type}")

    # ==================== Construction ====================

    @classmethod
    def from_url(cls: Type[S], url: str) -> S:
        """
        Create a backend from ``[scheme://][user[:pass]@]host[:port]/database``.

        :raises ConfigurationError: If the URL is malformed or selects a driver
            this backend cannot use.
        """
        return cls._create(ConnectionConfig.from_url(url))

    @classmethod
    def from_mapping(cls: Type[S], details: Mapping[str, Any]) -> S:
        """
        Create a backend from a mapping of connection details.

        Recognised keys: host, port, user, pass / password, database, driver.
        Other keys are ignored.
        """
        return cls._create(ConnectionConfig.from_mapping(details))

    @classmethod
    def from_credentials(
        cls: Type[S],
        user: str,
        password: str,
        database: str,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> S:
        """Create a backend from explicit credentials."""
        return cls._create(
            ConnectionConfig.from_mapping(
                {"user": user, "password": password, "database": database, "host": host, "port": port}
            )
        )

    @classmethod
    def from_env(cls: Type[S], settings: Optional[ConnectionSettings] = None) -> S:
        """Create a backend from FF_QUERY_* environment variables."""
        settings = settings or ConnectionSettings()
        return cls._create(settings.to_config())

    @classmethod
    def file(cls: Type[S], filename: str) -> S:
        """
        Create a backend for a file-based (serverless) database.

        :raises IllegalStateError: If the backend cannot open database files.
        """
        if not cls.supports_file:
            raise IllegalStateError(f"{cls.__name__} does not support file-based databases")
        return cls._create(ConnectionConfig(driver="sqlite", database=filename))

    @classmethod
    def _create(cls: Type[S], config: ConnectionConfig) -> S:
        if config.is_file_based and not cls.supports_file:
            raise ConfigurationError(
                f"{cls.__name__} cannot use the {config.driver} driver"
            )
        return cls(config=config)

    # ==================== Connection ====================

    @abstractmethod
    def connect(self) -> None:
        """Open the live connection if it is not open yet."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the live connection; a no-op when not connected."""
        pass

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ==================== Execution ====================

    @property
    @abstractmethod
    def adapter(self) -> BindAdapter:
        """Bind adapter translating tagged values for this backend."""
        pass

    @abstractmethod
    def _run(
        self, query: str, tags: Sequence[Any], params: Sequence[Any]
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Prepare, bind and execute one statement on the open connection.

        :return: Tuple of (rows as column -> value dicts, affected row count).
        :raises: One of driver_errors on failure.
        """
        pass

    def query(self) -> QueryBuilder:
        """Return a new QueryBuilder whose execute() runs on this backend."""
        return QueryBuilder(executor=self)

    def execute(self, builder: QueryBuilder) -> QueryResult:
        """
        Execute a built statement.

        :param builder: Statement to execute.
        :return: SUCCESS with the fetched rows, EMPTY if there was nothing to
            send, FAILURE carrying an ExecutionError if the database failed.
        :raises IllegalStateError: If no statement was started on the builder.
        """
        if builder.kind is None:
            raise IllegalStateError("Statement not created")

        query = builder.to_sql()
        if not query:
            return QueryResult.empty()

        binds = builder.bind_values()
        tags, params = self.adapter.convert_params(binds)

        try:
            if self.connection is None:
                self.connect()

            self.logger.debug(
                f"Executing {builder.kind.value} statement",
                extra={"query": query, "types": [str(getattr(t, "value", t)) for t in tags]},
            )
            rows, rowcount = self._run(self.adapter.convert_query(query), tags, params)
        except self.driver_errors as e:
            self.logger.error(f"Error with query statement: {e}", extra={"query": query}, exc_info=True)
            error = ExecutionError(f"Error with query statement: {e}", query=query, params=params)
            error.__cause__ = e
            return QueryResult.failure(error)

        return QueryResult.success(rows, rowcount=rowcount)
