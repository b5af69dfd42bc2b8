"""
Database connectivity resolution.

Sources are consulted in a fixed order and the first usable one wins:

1. VCAP_SERVICES (Cloud Foundry service bindings)
2. DATABASE_URL environment variable
3. ConnectionStrings:DefaultConnection in the configuration store
4. Local development default (PostgreSQL)
"""

import logging
import os
from typing import Mapping, Optional

from db_demo.db.descriptor import ConnectionDescriptor, DatabaseEngine, DescriptorSource
from db_demo.db.errors import DatabaseResolutionError
from db_demo.db.inference import infer_engine
from db_demo.utils.vcap import get_vcap_services, parse_catalog

logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "DATABASE_URL"
DEFAULT_CONNECTION_KEY = "ConnectionStrings:DefaultConnection"
DEFAULT_CONNECTION_STRING = (
    "Host=localhost;Port=5432;Database=demodb;Username=demouser;Password=demopass"
)


def _from_raw(connection_string: str, source: DescriptorSource) -> ConnectionDescriptor:
    return ConnectionDescriptor(
        connection_string=connection_string,
        engine=infer_engine(connection_string),
        source=source
    )


def _log_choice(descriptor: ConnectionDescriptor) -> None:
    logger.info(
        f"Using {descriptor.engine.value} database from {descriptor.source.value}"
    )
    logger.debug(f"Connection string: {descriptor.redacted()}")


def _configured_connection(config_store: Mapping[str, str]) -> Optional[str]:
    return config_store.get(DEFAULT_CONNECTION_KEY) or config_store.get(DEFAULT_CONNECTION_KEY.lower())


def resolve_database(
    env: Optional[Mapping[str, str]] = None,
    config_store: Optional[Mapping[str, str]] = None
) -> ConnectionDescriptor:
    """
    Resolve which database to use and how to reach it.

    Never raises for bad configuration: a broken VCAP_SERVICES is logged and
    skipped. Strings taken from DATABASE_URL or the configuration store are
    used verbatim and not validated. An empty DATABASE_URL or configured
    connection string counts as unset and falls through to the next source.

    Args:
        env: Environment variables (default: os.environ)
        config_store: Flat configuration store keyed
            ``ConnectionStrings:DefaultConnection``, for example
            ``ConfigurationStore.as_mapping()`` (default: empty)

    Returns:
        The resolved connection descriptor
    """
    env = os.environ if env is None else env
    config_store = {} if config_store is None else config_store

    vcap_services = get_vcap_services(env)
    if vcap_services:
        try:
            descriptor = parse_catalog(vcap_services)
        except DatabaseResolutionError as e:
            logger.error(f"Error parsing VCAP_SERVICES: {e}")
        else:
            _log_choice(descriptor)
            return descriptor

    database_url = env.get(DATABASE_URL_ENV)
    if database_url:
        descriptor = _from_raw(database_url, DescriptorSource.DATABASE_URL)
        _log_choice(descriptor)
        return descriptor

    configured = _configured_connection(config_store)
    if configured:
        descriptor = _from_raw(configured, DescriptorSource.CONFIGURATION)
        _log_choice(descriptor)
        return descriptor

    descriptor = ConnectionDescriptor(
        connection_string=DEFAULT_CONNECTION_STRING,
        engine=DatabaseEngine.POSTGRES,
        source=DescriptorSource.DEFAULT
    )
    _log_choice(descriptor)
    return descriptor
