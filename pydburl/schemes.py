import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Optional, Tuple


class GeneratorKind(enum.Enum):
    HOST = "host"
    PATH = "path"
    INSTANCE_PATH = "instance-path"
    SEMICOLON_KV = "semicolon-kv"
    EXTENDED_PROPERTIES = "extended-properties"


@dataclass(frozen=True)
class SchemeEntry:
    """A canonical driver, the scheme aliases that select it and the rule used
    to build its DSN.

    ``any_transport`` entries accept any ``+qualifier``, which then names the
    wrapped ODBC driver rather than a network transport.
    """

    name: str
    kind: GeneratorKind
    aliases: Tuple[str, ...] = ()
    transports: FrozenSet[str] = frozenset()
    any_transport: bool = False
    default_port: Optional[int] = None
    description: str = ""

    @property
    def names(self):
        return (self.name,) + self.aliases


HOST = GeneratorKind.HOST
PATH = GeneratorKind.PATH
INSTANCE_PATH = GeneratorKind.INSTANCE_PATH
SEMICOLON_KV = GeneratorKind.SEMICOLON_KV
EXTENDED_PROPERTIES = GeneratorKind.EXTENDED_PROPERTIES

MYSQL_TRANSPORTS = frozenset(("tcp", "udp", "unix"))

SCHEMES = (
    SchemeEntry(
        "mssql",
        INSTANCE_PATH,
        ("ms", "sqlserver"),
        default_port=1433,
        description="Microsoft SQL Server",
    ),
    SchemeEntry(
        "mysql",
        PATH,
        ("my", "mariadb", "maria", "percona", "aurora"),
        transports=MYSQL_TRANSPORTS,
        default_port=3306,
        description="MySQL",
    ),
    SchemeEntry(
        "ora",
        HOST,
        ("or", "oracle", "oci8", "oci"),
        default_port=1521,
        description="Oracle",
    ),
    SchemeEntry(
        "postgres",
        HOST,
        ("pg", "postgresql", "pgsql"),
        default_port=5432,
        description="PostgreSQL",
    ),
    SchemeEntry("sqlite3", PATH, ("sq", "sqlite", "file"), description="SQLite3"),
    SchemeEntry(
        "spanner", HOST, ("gs", "google", "span"), description="Google Spanner"
    ),
    SchemeEntry(
        "avatica",
        HOST,
        ("av", "phoenix"),
        default_port=8765,
        description="Apache Avatica",
    ),
    SchemeEntry(
        "clickhouse", HOST, ("ch",), default_port=9000, description="ClickHouse"
    ),
    SchemeEntry(
        "cockroachdb",
        HOST,
        ("cr", "cockroach", "crdb", "cdb"),
        default_port=26257,
        description="CockroachDB",
    ),
    SchemeEntry(
        "n1ql", HOST, ("n1", "couchbase"), default_port=8093, description="Couchbase"
    ),
    SchemeEntry(
        "firebirdsql",
        HOST,
        ("fb", "firebird"),
        default_port=3050,
        description="Firebird SQL",
    ),
    SchemeEntry(
        "memsql",
        PATH,
        ("me",),
        transports=MYSQL_TRANSPORTS,
        default_port=3306,
        description="MemSQL",
    ),
    SchemeEntry("adodb", SEMICOLON_KV, ("ad", "ado"), description="Microsoft ADODB"),
    SchemeEntry("odbc", SEMICOLON_KV, ("od",), any_transport=True, description="ODBC"),
    SchemeEntry(
        "oleodbc",
        EXTENDED_PROPERTIES,
        ("oo", "ole"),
        any_transport=True,
        description="OLE ODBC",
    ),
    SchemeEntry("ql", PATH, description="Cznic QL"),
    SchemeEntry(
        "hdb",
        HOST,
        ("sa", "saphana", "sap", "hana"),
        default_port=30015,
        description="SAP HANA",
    ),
    SchemeEntry(
        "sqlany",
        HOST,
        ("sy", "sybase", "any"),
        default_port=2638,
        description="Sybase SQL Anywhere",
    ),
    SchemeEntry(
        "voltdb",
        HOST,
        ("vo", "volt", "vdb"),
        default_port=21212,
        description="VoltDB",
    ),
    SchemeEntry("yql", HOST, ("yq",), description="YQL"),
)


def _build_aliases(entries):
    aliases = {}
    for entry in entries:
        for alias in entry.names:
            alias = alias.lower()
            other = aliases.setdefault(alias, entry)
            if other is not entry:
                raise ValueError(
                    f"Scheme alias {alias} is registered for both {other.name} "
                    f"and {entry.name}."
                )
    return MappingProxyType(aliases)


ALIASES = _build_aliases(SCHEMES)


def lookup(alias):
    """Returns the SchemeEntry registered for ``alias``, or None."""
    return ALIASES.get(alias.lower())


def list_schemes():
    return sorted(SCHEMES, key=lambda entry: entry.name)
