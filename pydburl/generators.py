from urllib.parse import quote, urlencode

from pydburl import schemes
from pydburl.core import InvalidDatabaseScheme
from pydburl.schemes import GeneratorKind

OLEODBC_PROVIDER = "MSDASQL.1"


def _userinfo(url):
    if url.user is None:
        return ""

    userinfo = quote(url.user, safe="")
    if url.password is not None:
        userinfo += ":" + quote(url.password, safe="")
    return userinfo + "@"


def _netloc(host, port):
    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host += f":{port}"
    return host


def _query(query):
    if len(query) == 0:
        return ""
    return "?" + urlencode(sorted(query.items()))


def _fragment(url):
    return "" if url.fragment == "" else "#" + quote(url.fragment, safe="")


def quote_odbc(value):
    if value != value.strip() or any(c in value for c in ";={}"):
        return "{" + value.replace("}", "}}") + "}"
    return value


def quote_adodb(value):
    if value != value.strip() or any(c in value for c in ';="'):
        return '"' + value.replace('"', '""') + '"'
    return value


def _options(components, query, quote_value):
    options = []
    names = set()
    for k, v in components:
        if v is not None and v != "":
            options.append((k, str(v)))
            names.add(k.lower())

    for k in sorted(query):
        if k.lower() not in names and query[k] != "":
            options.append((k, query[k]))

    return [f"{k}={quote_value(v)}" for k, v in options]


def gen_host(entry, url):
    scheme = entry.name
    if url.transport != "":
        scheme += "+" + url.transport

    if url.opaque:
        return scheme + ":" + quote(url.path) + _query(url.query) + _fragment(url)

    path = "".join("/" + quote(s, safe="") for s in url.path_segments)
    return (
        f"{scheme}://{_userinfo(url)}{_netloc(url.host or '', url.port)}"
        f"{path}{_query(url.query)}{_fragment(url)}"
    )


def gen_path(entry, url):
    # scheme:///path has no authority and names a local file too
    if url.opaque or (url.host is None and url.user is None):
        return url.path + _query(url.query)
    return gen_host(entry, url)


def gen_instance_path(entry, url):
    if url.opaque:
        raise InvalidDatabaseScheme(f"A host is required for {entry.name}.")

    segments = url.path_segments
    if len(segments) > 2:
        raise InvalidDatabaseScheme(
            f"The path for {entry.name} must be /dbname or /instance/dbname."
        )
    instance, dbname = ("",) * (2 - len(segments)) + segments

    host = url.host or ""
    if instance != "":
        host += "\\" + quote(instance, safe="")

    query = dict(url.query)
    if dbname != "":
        query["database"] = dbname

    return f"sqlserver://{_userinfo(url)}{_netloc(host, url.port)}{_query(query)}"


def _odbc_options(url):
    port = url.port
    if port is None and url.host is not None and url.transport != "":
        wrapped = schemes.lookup(url.transport)
        if wrapped is not None:
            port = wrapped.default_port

    if url.opaque:
        database = url.path
    else:
        database = url.path_segments[0] if url.path_segments else ""

    options = _options(
        (
            ("Server", url.host),
            ("Port", port),
            ("Database", database),
            ("UID", url.user),
            ("PWD", url.password),
        ),
        url.query,
        quote_odbc,
    )
    if url.transport != "":
        driver = url.transport.replace("+", " ").replace("}", "}}")
        options.insert(0, "Driver={" + driver + "}")

    return ";".join(options)


def gen_odbc(entry, url):
    return _odbc_options(url)


def gen_adodb(entry, url):
    if url.opaque:
        data_source, database = url.path, ""
    else:
        segments = url.path_segments
        data_source = segments[0] if segments else "."
        database = "/".join(segments[1:])

    options = _options(
        (
            ("Provider", url.host),
            ("Port", url.port),
            ("Data Source", data_source),
            ("Database", database),
            ("User ID", url.user),
            ("Password", url.password),
        ),
        url.query,
        quote_adodb,
    )
    return ";".join(options)


SEMICOLON_KV_GENERATORS = {
    "adodb": gen_adodb,
    "odbc": gen_odbc,
}


def gen_semicolon_kv(entry, url):
    try:
        gen = SEMICOLON_KV_GENERATORS[entry.name]
    except KeyError:
        raise InvalidDatabaseScheme(
            f"No key/value DSN format is known for {entry.name}."
        )
    return gen(entry, url)


def gen_extended_properties(entry, url):
    if url.transport == "":
        raise InvalidDatabaseScheme(
            f"{entry.name} requires a wrapped protocol, as in {entry.name}+postgres."
        )

    props = _odbc_options(url).replace('"', '""')
    return f'Provider={OLEODBC_PROVIDER};Extended Properties="{props}"'


GENERATORS = {
    GeneratorKind.HOST: gen_host,
    GeneratorKind.PATH: gen_path,
    GeneratorKind.INSTANCE_PATH: gen_instance_path,
    GeneratorKind.SEMICOLON_KV: gen_semicolon_kv,
    GeneratorKind.EXTENDED_PROPERTIES: gen_extended_properties,
}


def generate(entry, url):
    """Assembles the DSN for ``url`` in the native syntax of the driver
    described by ``entry``.
    """
    return GENERATORS[entry.kind](entry, url)
