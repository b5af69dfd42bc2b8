"""
VCAP_SERVICES parser for Cloud Foundry service bindings.

Extracts MySQL or PostgreSQL credentials from the CF service catalog and
turns them into a connection descriptor.
"""

import os
import json
import logging
from typing import Optional, Dict, Any, List, Mapping, Sequence

from db_demo.db.descriptor import (
    ConnectionDescriptor,
    DatabaseEngine,
    DescriptorSource,
    compose_connection_string,
    first_present,
)
from db_demo.db.errors import (
    InvalidCredential,
    MalformedCatalog,
    MissingCredential,
    NoDatabaseService,
)
from db_demo.db.uri import parse_uri

logger = logging.getLogger(__name__)

# Service type keys, checked in order. MySQL is always checked first.
MYSQL_SERVICE_ALIASES = ("mysql", "p.mysql")
POSTGRES_SERVICE_ALIASES = ("postgres", "p.postgresql", "postgresql")

SERVICE_FAMILIES = (
    (DatabaseEngine.MYSQL, MYSQL_SERVICE_ALIASES),
    (DatabaseEngine.POSTGRES, POSTGRES_SERVICE_ALIASES),
)

# Credential field aliases, preferred key first
HOST_FIELDS = ("hostname", "host")
DATABASE_FIELDS = ("name", "database")
USERNAME_FIELDS = ("username", "user")


def get_vcap_services(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Read the raw VCAP_SERVICES value.

    Returns:
        The JSON string, or None if unset or empty
    """
    env = os.environ if env is None else env
    vcap_services = env.get("VCAP_SERVICES")
    if not vcap_services:
        return None
    return vcap_services


def load_catalog(raw: str) -> Dict[str, Any]:
    """
    Parse a VCAP_SERVICES document.

    Raises:
        MalformedCatalog: If the document is not valid JSON or not an object
    """
    try:
        catalog = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise MalformedCatalog(f"VCAP_SERVICES is not valid JSON: {e}") from e

    if not isinstance(catalog, dict):
        raise MalformedCatalog(
            f"VCAP_SERVICES must be a JSON object, got {type(catalog).__name__}"
        )
    return catalog


def find_service_instances(
    catalog: Mapping[str, Any],
    aliases: Sequence[str]
) -> Optional[List[Any]]:
    """
    Find the instance list for the first service type alias present.

    A present key wins even when its list is empty; the caller decides
    whether that is usable.
    """
    for service_type in aliases:
        if service_type in catalog:
            return catalog[service_type]
    return None


def _first_credentials(instances: Any, engine: DatabaseEngine) -> Dict[str, Any]:
    if not isinstance(instances, list) or not instances:
        raise MissingCredential(f"No {engine.display_name} service instance bound")

    instance = instances[0]
    if not isinstance(instance, dict):
        raise MissingCredential(f"{engine.display_name} service instance is not an object")

    credentials = instance.get("credentials")
    if not isinstance(credentials, dict):
        raise MissingCredential(f"{engine.display_name} service has no credentials object")
    return credentials


def _require(credentials: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    value = first_present(credentials, aliases)
    if value is None:
        raise MissingCredential(f"credentials.{aliases[0]} is missing")
    return value


def _port(credentials: Mapping[str, Any], engine: DatabaseEngine) -> int:
    port = credentials.get("port")
    if port is None:
        return engine.default_port
    if isinstance(port, bool):
        raise InvalidCredential(f"credentials.port is not a number: {port!r}")
    if isinstance(port, float) and not port.is_integer():
        raise InvalidCredential(f"credentials.port is not an integer: {port!r}")
    try:
        return int(port)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidCredential(f"credentials.port is not a number: {port!r}") from e


def build_connection_string(credentials: Mapping[str, Any], engine: DatabaseEngine) -> str:
    """
    Build a native connection string from a service credentials object.

    A non-empty ``uri`` takes precedence over individual fields. Otherwise
    host, database and username are looked up by alias, port falls back to
    the engine default, and password must be present (an empty password is
    accepted, a missing one is not).

    Raises:
        InvalidUri: If ``uri`` is set but unparseable
        MissingCredential: If a required field is absent
        InvalidCredential: If ``port`` is not an integer
    """
    uri = credentials.get("uri")
    if uri:
        connection_string = parse_uri(str(uri), engine)
        logger.debug(f"{engine.display_name} credentials read from VCAP_SERVICES URI")
        return connection_string

    if "password" not in credentials or credentials["password"] is None:
        raise MissingCredential("credentials.password is missing")

    connection_string = compose_connection_string(
        engine,
        host=_require(credentials, HOST_FIELDS),
        port=_port(credentials, engine),
        database=_require(credentials, DATABASE_FIELDS),
        username=_require(credentials, USERNAME_FIELDS),
        password=credentials["password"]
    )
    logger.debug(f"{engine.display_name} credentials read from VCAP_SERVICES fields")
    return connection_string


def parse_catalog(raw: str) -> ConnectionDescriptor:
    """
    Resolve a connection descriptor from a VCAP_SERVICES document.

    MySQL service types are checked before PostgreSQL ones, and only the
    first bound instance of the matched type is used.

    Args:
        raw: VCAP_SERVICES JSON document

    Returns:
        Descriptor tagged with the matched engine

    Raises:
        MalformedCatalog: If the document is not a JSON object
        NoDatabaseService: If no known database service type is bound
        InvalidUri, MissingCredential, InvalidCredential: If the matched
            service's credentials are unusable
    """
    catalog = load_catalog(raw)

    for engine, aliases in SERVICE_FAMILIES:
        instances = find_service_instances(catalog, aliases)
        if instances is None:
            continue

        credentials = _first_credentials(instances, engine)
        return ConnectionDescriptor(
            connection_string=build_connection_string(credentials, engine),
            engine=engine,
            source=DescriptorSource.VCAP_SERVICES
        )

    logger.warning(
        f"No MySQL or PostgreSQL service found in VCAP_SERVICES "
        f"(bound types: {', '.join(sorted(catalog)) or 'none'})"
    )
    raise NoDatabaseService("No MySQL or PostgreSQL service found in VCAP_SERVICES")


def is_cf_environment(env: Optional[Mapping[str, str]] = None) -> bool:
    """Check if running in Cloud Foundry environment."""
    env = os.environ if env is None else env
    return env.get("VCAP_SERVICES") is not None or env.get("VCAP_APPLICATION") is not None
