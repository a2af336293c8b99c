import importlib
import logging
import sqlite3
from urllib.parse import parse_qsl, quote

from pydburl.core import PydburlException

log = logging.getLogger(__name__)


class UnknownDriver(PydburlException):
    pass


def module_connector(module_name, dsn_keyword=None):
    """Returns a connect function that imports the DB-API module
    ``module_name`` on first use and passes it the DSN, positionally or as the
    ``dsn_keyword`` argument.
    """

    def connect(dsn, **kwargs):
        log.debug(f"Connecting through {module_name}")
        module = importlib.import_module(module_name)
        if dsn_keyword is None:
            return module.connect(dsn, **kwargs)

        kwargs[dsn_keyword] = dsn
        return module.connect(**kwargs)

    return connect


def connect_sqlite3(dsn, **kwargs):
    # sqlite only reads query options from file: URIs
    path, sep, options = dsn.rpartition("?")
    if sep != "":
        try:
            parse_qsl(options, strict_parsing=True)
        except ValueError:
            sep = ""

    if sep == "":
        return sqlite3.connect(dsn, **kwargs)
    return sqlite3.connect(f"file:{quote(path)}?{options}", uri=True, **kwargs)


_connectors = {
    "sqlite3": connect_sqlite3,
    "postgres": module_connector("psycopg2"),
    "clickhouse": module_connector("clickhouse_driver.dbapi", "dsn"),
    "odbc": module_connector("pyodbc"),
    "adodb": module_connector("adodbapi"),
    "oleodbc": module_connector("adodbapi"),
}


def register(driver, connect_func):
    _connectors[driver] = connect_func


def get_connector(driver):
    try:
        return _connectors[driver]
    except KeyError:
        raise UnknownDriver(
            f"No connector is registered for the {driver} driver, use "
            f"pydburl.register() to add one."
        )


def drivers():
    return sorted(_connectors)
