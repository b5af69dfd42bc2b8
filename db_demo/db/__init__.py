"""Connection descriptor types and credential parsers."""

from db_demo.db.descriptor import (
    ConnectionDescriptor,
    DatabaseEngine,
    DescriptorSource,
    compose_connection_string,
)
from db_demo.db.errors import (
    DatabaseResolutionError,
    InvalidCredential,
    InvalidUri,
    MalformedCatalog,
    MissingCredential,
    NoDatabaseService,
)
from db_demo.db.inference import infer_engine
from db_demo.db.uri import parse_uri

__all__ = [
    "ConnectionDescriptor",
    "DatabaseEngine",
    "DescriptorSource",
    "compose_connection_string",
    "DatabaseResolutionError",
    "InvalidCredential",
    "InvalidUri",
    "MalformedCatalog",
    "MissingCredential",
    "NoDatabaseService",
    "infer_engine",
    "parse_uri",
]
