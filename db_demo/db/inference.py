"""
Engine inference for raw connection strings.
"""

from db_demo.db.descriptor import DatabaseEngine

MYSQL_MARKERS = ("Server=", "server=")


def infer_engine(connection_string: str) -> DatabaseEngine:
    """
    Guess the engine family of a connection string from its shape.

    ``Server=`` is the host attribute of the MySQL native format, so any
    string containing it (as ``Server=`` or ``server=``) is treated as MySQL;
    everything else, URIs included, is treated as PostgreSQL.

    This is a substring heuristic, not a parser. A PostgreSQL string that
    contains ``Server=`` anywhere, even inside a password, is reported as
    MySQL.
    """
    if any(marker in connection_string for marker in MYSQL_MARKERS):
        return DatabaseEngine.MYSQL
    return DatabaseEngine.POSTGRES
