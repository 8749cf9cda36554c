"""
Parameter binding adapters for multi-backend support.

The QueryBuilder renders ``?`` placeholders and classifies its values into
BindValues. Each adapter maps those onto what its client library expects:
- Type tags (driver parameter types vs. single-character codes)
- Placeholder style (? vs %s)
- Value coercion per tag
"""

from abc import ABC, abstractmethod
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, List, Sequence, Tuple

from ..query_builder.bind import BindKind, BindValue

# Client libraries bind these natively
_NATIVE_TYPES = (str, bytes, bytearray, memoryview, date, time, timedelta)


def _passthrough(value: Any) -> Any:
    """Return a STRING-kind value in the form handed to the driver."""
    if isinstance(value, _NATIVE_TYPES):
        return value
    return str(value)


class BindAdapter(ABC):
    """
    Abstract base class for bind adapters.

    Each adapter handles backend-specific binding behaviour:
    - Parameter style (qmark ? vs format %s)
    - Type tag selection per value kind
    - Conversion of tagged values into driver arguments
    """

    @abstractmethod
    def get_param_style(self) -> str:
        """
        Return the placeholder style expected by the client library.

        Returns:
            'qmark': ? (sqlite3, mysql-connector prepared cursors)
            'format': %s (PyMySQL)
        """
        pass

    @abstractmethod
    def type_tag(self, bind: BindValue) -> Any:
        """Return the backend's type tag for a bind value."""
        pass

    @abstractmethod
    def coerce(self, bind: BindValue, tag: Any) -> Any:
        """Convert a bind value to the Python object handed to the driver."""
        pass

    def convert_query(self, query: str) -> str:
        """Convert ``?`` placeholders to the adapter's parameter style."""
        if self.get_param_style() == "format":
            # PyMySQL interpolates with %, so literal percent signs are doubled first
            return query.replace("%", "%%").replace("?", "%s")
        return query

    def convert_params(self, binds: Sequence[BindValue]) -> Tuple[List[Any], List[Any]]:
        """
        Tag and coerce bind values in placeholder order.

        Args:
            binds: Tagged values from QueryBuilder.bind_values()

        Returns:
            Tuple of (type_tags, driver_values)
        """
        tags = [self.type_tag(bind) for bind in binds]
        values = [self.coerce(bind, tag) for bind, tag in zip(binds, tags)]
        return tags, values


class DriverParamType(str, Enum):
    """Parameter types used by the Driver backend."""

    STR = "str"
    INT = "int"
    BOOL = "bool"
    NULL = "null"


class DriverBindAdapter(BindAdapter):
    """Adapter for the Driver backend (PyMySQL over the network, sqlite3 for files)."""

    _TAGS = {
        BindKind.STRING: DriverParamType.STR,
        BindKind.INTEGER: DriverParamType.INT,
        BindKind.BOOLEAN: DriverParamType.BOOL,
        BindKind.NULL: DriverParamType.NULL,
        # no float parameter type; the tag is STR but the number is passed as is
        BindKind.DOUBLE: DriverParamType.STR,
    }

    def __init__(self, param_style: str = "format"):
        self.param_style = param_style

    def get_param_style(self) -> str:
        return self.param_style

    def type_tag(self, bind: BindValue) -> DriverParamType:
        return self._TAGS[bind.kind]

    def coerce(self, bind: BindValue, tag: DriverParamType) -> Any:
        if tag is DriverParamType.NULL:
            return None
        if tag is DriverParamType.BOOL:
            return bool(bind.value)
        if tag is DriverParamType.INT:
            return int(bind.value)
        if bind.kind is BindKind.DOUBLE:
            # sqlite3 cannot bind Decimal
            return float(bind.value)
        return _passthrough(bind.value)


class MySQLBindAdapter(BindAdapter):
    """Adapter for the MySQL backend (mysql-connector-python prepared statements)."""

    _TAGS = {
        BindKind.INTEGER: "i",
        BindKind.BOOLEAN: "i",
        BindKind.DOUBLE: "d",
        BindKind.STRING: "s",
        BindKind.NULL: "s",
    }

    def get_param_style(self) -> str:
        return "qmark"

    def type_tag(self, bind: BindValue) -> str:
        return self._TAGS[bind.kind]

    def type_string(self, binds: Sequence[BindValue]) -> str:
        """Concatenate the type codes of all values, e.g. ``"sid"``."""
        return "".join(self.type_tag(bind) for bind in binds)

    def coerce(self, bind: BindValue, tag: str) -> Any:
        if bind.is_null:
            return None
        if tag == "i":
            return int(bind.value)
        if tag == "d":
            return bind.value if isinstance(bind.value, Decimal) else float(bind.value)
        return _passthrough(bind.value)
