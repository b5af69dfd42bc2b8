"""
Exceptions raised while resolving database connectivity.

Every error here describes a failure of a single configuration source.
The resolver catches them and falls through to the next source.
"""


class DatabaseResolutionError(Exception):
    """Base class for configuration source failures."""


class MalformedCatalog(DatabaseResolutionError):
    """VCAP_SERVICES is not valid JSON or not a JSON object."""


class NoDatabaseService(DatabaseResolutionError):
    """The service catalog has no recognized database service."""


class InvalidUri(DatabaseResolutionError):
    """A credentials URI could not be parsed or has no host."""


class InvalidCredential(DatabaseResolutionError):
    """A credential field is present but unusable."""


class MissingCredential(InvalidCredential):
    """A required credential field (or the credentials object) is absent."""
