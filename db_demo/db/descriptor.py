"""
Connection descriptor and native connection-string builders.

The descriptor is the only thing handed to the data-access layer: a
connection string in the engine's native attribute-value syntax plus the
engine tag used to pick a driver.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

DEFAULT_PORTS = {
    "mysql": 3306,
    "postgres": 5432,
}

_PASSWORD_PATTERN = re.compile(r"(?i)(password\s*=)[^;]*")


class DatabaseEngine(str, Enum):
    """Supported database engine families."""
    MYSQL = "mysql"
    POSTGRES = "postgres"

    @property
    def default_port(self) -> int:
        return DEFAULT_PORTS[self.value]

    @property
    def display_name(self) -> str:
        return "MySQL" if self is DatabaseEngine.MYSQL else "PostgreSQL"


class DescriptorSource(str, Enum):
    """Configuration source a descriptor was resolved from."""
    VCAP_SERVICES = "vcap_services"
    DATABASE_URL = "database_url"
    CONFIGURATION = "configuration"
    DEFAULT = "default"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Resolved database connection: native connection string and engine."""
    connection_string: str
    engine: DatabaseEngine
    source: DescriptorSource = DescriptorSource.DEFAULT

    def redacted(self) -> str:
        """Connection string with the password value masked."""
        return _PASSWORD_PATTERN.sub(r"\1***", self.connection_string)

    def to_dict(self) -> Dict[str, str]:
        """Diagnostic view, never includes the connection string."""
        return {
            "engine": self.engine.value,
            "source": self.source.value,
        }


def first_present(values: Mapping[str, Any], aliases: Sequence[str]) -> Optional[Any]:
    """
    Return the value of the first alias present in a mapping.

    A key mapped to None counts as absent, so ``{"hostname": None,
    "host": "db"}`` resolves to ``"db"``.

    Args:
        values: Mapping to search (e.g. a credentials object)
        aliases: Acceptable keys, in order of preference

    Returns:
        The first non-None value, or None if no alias is present
    """
    for alias in aliases:
        value = values.get(alias)
        if value is not None:
            return value
    return None


def _compose_mysql(host: str, port: int, database: str, username: str, password: str) -> str:
    return (
        f"Server={host};Port={port};Database={database};"
        f"User={username};Password={password};SslMode=Required;"
    )


def _compose_postgres(host: str, port: int, database: str, username: str, password: str) -> str:
    return (
        f"Host={host};Port={port};Database={database};"
        f"Username={username};Password={password};"
        f"SSL Mode=Require;Trust Server Certificate=true"
    )


_BUILDERS: Dict[DatabaseEngine, Callable[..., str]] = {
    DatabaseEngine.MYSQL: _compose_mysql,
    DatabaseEngine.POSTGRES: _compose_postgres,
}


def compose_connection_string(
    engine: DatabaseEngine,
    host: str,
    port: int,
    database: str,
    username: str,
    password: str
) -> str:
    """
    Build a native connection string for the given engine.

    Both formats always carry the engine's TLS directive
    (``SslMode=Required`` for MySQL, ``SSL Mode=Require`` for PostgreSQL).
    """
    return _BUILDERS[engine](host, port, database, username, password)
