from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from urllib.parse import parse_qsl, unquote, urlsplit

from pydburl import schemes


class PydburlException(Exception):
    pass


class PydburlClientException(PydburlException):
    """Generic exception raised for errors that are related to the URL being
    parsed rather than to a database or its driver.
    """

    pass


class InvalidDatabaseScheme(PydburlClientException):
    pass


class UnknownDatabaseScheme(PydburlClientException):
    pass


class InvalidTransportProtocol(PydburlClientException):
    pass


class InvalidPort(PydburlClientException):
    pass


@dataclass(frozen=True)
class NormalizedURL:
    scheme: str
    transport: str = ""
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = ""
    path_segments: Tuple[str, ...] = ()
    opaque: bool = False
    query: Mapping[str, str] = field(default_factory=dict)
    fragment: str = ""


@dataclass(frozen=True)
class ParseResult:
    driver: str
    dsn: str
    normalized: NormalizedURL


def resolve_scheme(scheme):
    """Splits ``alias+transport`` and resolves the alias through the scheme
    registry.

    Returns a ``(SchemeEntry, transport)`` tuple, with transport being an
    empty string when no qualifier was given.
    """
    alias, plus, transport = scheme.partition("+")
    if alias == "":
        raise InvalidDatabaseScheme(f"Invalid database scheme {scheme!r}.")

    entry = schemes.lookup(alias)
    if entry is None:
        raise UnknownDatabaseScheme(f"Unknown database scheme {alias!r}.")

    if plus:
        if entry.any_transport and transport != "":
            return entry, transport

        transport = transport.lower()
        if transport not in entry.transports:
            raise InvalidTransportProtocol(
                f"Invalid transport protocol {transport!r} for {entry.name}."
            )

    return entry, transport


def decompose(urlstr, entry, transport=""):
    scheme = urlstr.partition(":")[0]
    remainder = urlstr[len(scheme) + 1 :]

    try:
        parts = urlsplit(urlstr)
    except ValueError as e:
        raise InvalidDatabaseScheme(f"Malformed database URL for {scheme!r}.") from e

    if parts.scheme == "" or parts.scheme != scheme.lower():
        raise InvalidDatabaseScheme(f"Invalid database scheme {scheme!r}.")

    segments = tuple(unquote(s) for s in parts.path.split("/") if s)
    opaque = not remainder.startswith("//")
    if opaque:
        path = unquote(parts.path)
    else:
        path = "".join("/" + s for s in segments)

    params = {
        "scheme": scheme.partition("+")[0].lower(),
        "transport": transport,
        "path": path,
        "path_segments": segments,
        "opaque": opaque,
        "query": MappingProxyType(
            dict(parse_qsl(parts.query, keep_blank_values=True))
        ),
        "fragment": unquote(parts.fragment),
    }

    if not opaque:
        try:
            port = parts.port
        except ValueError as e:
            raise InvalidPort(
                "The port must be an integer between 0 and 65535."
            ) from e

        host = parts.hostname
        if port is None and host is not None:
            port = entry.default_port

        params["host"] = host
        params["port"] = port
        if parts.username is not None:
            params["user"] = unquote(parts.username)
        if parts.password is not None:
            params["password"] = unquote(parts.password)

    return NormalizedURL(**params)
