"""
Connection configuration for ff-query backends.

ConnectionConfig is the validated record every backend is built from.
ConnectionSettings reads the same fields from FF_QUERY_* environment
variables (or a .env file) for applications that configure through the
environment.
"""

from typing import Any, Literal, Mapping
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
DEFAULT_USER = "root"

DriverName = Literal["mysql", "sqlite"]


class ConnectionConfig(BaseModel):
    """
    Connection details for a backend.

    Unknown keys are ignored and missing keys keep their defaults, so a
    mapping taken from any source can be passed as-is. The password is
    accepted as either ``password`` or ``pass``.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    user: str = DEFAULT_USER
    password: SecretStr = Field(default=SecretStr(""), alias="pass")
    database: str = ""
    driver: DriverName = "mysql"

    @field_validator("host", "user", "database", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Strip surrounding whitespace; None falls back to an empty string."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("driver", mode="before")
    @classmethod
    def normalize_driver(cls, v):
        """Accept sqlite3 / file as aliases of sqlite."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v in ("sqlite3", "file"):
                return "sqlite"
        return v

    @property
    def is_file_based(self) -> bool:
        return self.driver == "sqlite"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConnectionConfig":
        """
        Validate a mapping of connection details.

        :raises ConfigurationError: If a recognised key holds an invalid value.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid connection configuration: {e}") from e

    @classmethod
    def from_url(cls, url: str) -> "ConnectionConfig":
        """
        Parse ``[scheme://][user[:pass]@]host[:port]/database``.

        A ``sqlite`` scheme selects a file database and keeps the path as
        the database name, e.g. ``sqlite:///var/data/app.db``.

        :raises ConfigurationError: If the URL cannot be parsed.
        """
        url = url.strip()
        scheme = ""
        if "://" in url:
            scheme, url = url.split("://", 1)
            scheme = scheme.lower()

        if scheme in ("sqlite", "sqlite3", "file"):
            return cls.from_mapping({"driver": "sqlite", "database": unquote(url)})

        try:
            parts = urlsplit(f"//{url}")
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid connection URL: {e}") from e

        data: dict[str, Any] = {"database": unquote(parts.path.strip("/"))}
        if parts.hostname:
            data["host"] = parts.hostname
        if port is not None:
            data["port"] = port
        if parts.username is not None:
            data["user"] = unquote(parts.username)
        if parts.password is not None:
            data["pass"] = unquote(parts.password)
        if scheme:
            data["driver"] = scheme
        return cls.from_mapping(data)

    def __repr__(self) -> str:
        return (
            f"ConnectionConfig(driver={self.driver!r}, host={self.host!r}, port={self.port!r}, "
            f"user={self.user!r}, database={self.database!r})"
        )


class ConnectionSettings(BaseSettings):
    """Connection details read from FF_QUERY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FF_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    user: str = DEFAULT_USER
    password: SecretStr = SecretStr("")
    database: str = ""
    driver: str = "mysql"

    def to_config(self) -> ConnectionConfig:
        """Convert to a validated ConnectionConfig."""
        return ConnectionConfig.from_mapping(
            {
                "host": self.host,
                "port": self.port,
                "user": self.user,
                "password": self.password,
                "database": self.database,
                "driver": self.driver,
            }
        )
