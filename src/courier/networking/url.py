"""Structured URL model.

A ``Url`` can analyze a full URL string or be assembled field by field; both
paths go through the same setters, so a scheme is validated and gets its
default port the same way whichever way the object was built::

    url = Url("http://www.example.com:8080/index.html?x=A&y=B")
    url.port      # 8080
    url.origin    # "http://www.example.com"

    url = Url()
    url.scheme = "https"
    url.host = "www.example.com"
    url.set_query({"x": "A", "y": "B"})
    url.get_url()  # "https://www.example.com/?x=A&y=B"
"""

from __future__ import annotations

import importlib.util
import logging
import re
from enum import Enum
from typing import Iterable, Mapping, Union
from urllib.parse import SplitResult, quote, quote_plus, urlencode, urlsplit

from .errors import (
    MalformedUrlError,
    MissingCapabilityError,
    UnsupportedSchemeError,
)

logger = logging.getLogger(__name__)

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}

# Module that must be importable before a scheme can be used.
SCHEME_CAPABILITIES: dict[str, str] = {
    "https": "ssl",
}

_SCHEME_DELIMITER = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")

QueryValue = Union[str, Mapping[str, object], Iterable[tuple[str, object]]]


class QueryEncoding(Enum):
    """Space encoding rule used when building a query string."""

    RFC3986 = "rfc3986"  # ' ' -> '%20'
    RFC1738 = "rfc1738"  # ' ' -> '+'


def encode_query(
    pairs: Mapping[str, object] | Iterable[tuple[str, object]],
    encoding: QueryEncoding = QueryEncoding.RFC3986,
) -> str:
    """URL-encode key/value pairs into a query string."""

    quote_via = quote if encoding is QueryEncoding.RFC3986 else quote_plus
    return urlencode(pairs, quote_via=quote_via)


def _netloc_host(netloc: str) -> str:
    """Host part of a netloc, case preserved, IPv6 brackets removed."""

    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        return hostport[1:].partition("]")[0]
    return hostport.partition(":")[0]


def _has_capability(module_name: str) -> bool:
    return importlib.util.find_spec(module_name) is not None


def check_scheme(scheme: str) -> str:
    """Return the lower-cased scheme if it can be used, raise otherwise."""

    scheme = scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedSchemeError(f"scheme is not supported: {scheme!r}")
    capability = SCHEME_CAPABILITIES.get(scheme)
    if capability is not None and not _has_capability(capability):
        raise MissingCapabilityError(
            f"{scheme} requires the {capability} module"
        )
    return scheme


class Url:
    """URL decomposed into scheme, authority, path, query and fragment."""

    def __init__(self, source: str = "") -> None:
        self._scheme = ""
        self._host = ""
        self._port = 0
        self._user = ""
        self._password = ""
        self._path = "/"
        self._query = ""
        self._fragment = ""
        self.set_url(source)

    @classmethod
    def parse(cls, source: str) -> Url:
        """Build a Url from a full URL string."""
        if not source:
            raise MalformedUrlError("url is empty")
        return cls(source)

    def set_url(self, source: str) -> None:
        """Replace the components with the ones found in ``source``.

        An empty string leaves the object untouched.

        Raises:
            MalformedUrlError: no scheme delimiter, no authority, bad port or
                missing host.
            UnsupportedSchemeError: the scheme is not supported.
            MissingCapabilityError: the scheme cannot be used here.
        """
        if source == "":
            return
        if not _SCHEME_DELIMITER.match(source):
            raise MalformedUrlError(
                f"url should start with a scheme: {source!r}"
            )

        parts = self._split(source)
        if not parts.netloc:
            raise MalformedUrlError(f"missing authority in url: {source!r}")
        if not parts.hostname:
            raise MalformedUrlError(f"missing host in url: {source!r}")
        try:
            port = parts.port
        except ValueError as exc:
            raise MalformedUrlError(
                f"invalid port in url: {source!r}"
            ) from exc

        scheme = check_scheme(parts.scheme)

        self._port = 0
        self.scheme = scheme
        self._user = parts.username or ""
        self._password = parts.password or ""
        self._host = _netloc_host(parts.netloc)
        if port is not None:
            self._port = port
        self._path = parts.path or "/"
        self._query = parts.query
        self._fragment = parts.fragment
        logger.debug("url set to %s", self.get_url())

    @staticmethod
    def _split(source: str) -> SplitResult:
        try:
            return urlsplit(source)
        except ValueError as exc:
            raise MalformedUrlError(f"ill formed url: {source!r}") from exc

    # Scheme

    @property
    def scheme(self) -> str:
        return self._scheme

    @scheme.setter
    def scheme(self, scheme: str) -> None:
        self._scheme = check_scheme(scheme)
        if self._port == 0:
            self._port = DEFAULT_PORTS[self._scheme]

    # Authority

    @property
    def host(self) -> str:
        return self._host

    @host.setter
    def host(self, host: str) -> None:
        self._host = host

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, port: int) -> None:
        self._port = int(port)

    @property
    def user(self) -> str:
        return self._user

    @user.setter
    def user(self, user: str) -> None:
        self._user = user

    @property
    def password(self) -> str:
        return self._password

    @password.setter
    def password(self, password: str) -> None:
        self._password = password

    def default_port(self) -> int | None:
        """Return the well-known port of the current scheme, if any."""
        return DEFAULT_PORTS.get(self._scheme)

    def is_standard_port(self) -> bool:
        return self._port == self.default_port()

    def _url_host(self) -> str:
        if ":" in self._host:
            return f"[{self._host}]"
        return self._host

    @property
    def host_and_port(self) -> str:
        """Host followed by ``:port`` unless the port is standard or unset."""
        host = self._url_host()
        if self._port != 0 and not self.is_standard_port():
            return f"{host}:{self._port}"
        return host

    @property
    def authority(self) -> str:
        """``[user[:pass]@]host[:port]``."""
        userinfo = ""
        if self._user:
            userinfo = self._user
            if self._password:
                userinfo += ":" + self._password
            userinfo += "@"
        return userinfo + self.host_and_port

    @property
    def origin(self) -> str:
        return f"{self._scheme}://{self._url_host()}"

    # Path, query, fragment

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, path: str) -> None:
        self._path = path

    @property
    def query(self) -> str:
        return self._query

    def set_query(
        self,
        query: QueryValue,
        encoding: QueryEncoding = QueryEncoding.RFC3986,
    ) -> None:
        """Set the query from an encoded string or from key/value pairs."""
        if isinstance(query, str):
            self._query = query
        else:
            self._query = encode_query(query, encoding)

    def add_query(
        self,
        key: str,
        value: object,
        encoding: QueryEncoding = QueryEncoding.RFC3986,
    ) -> None:
        """Append one encoded ``key=value`` pair to the query."""
        pair = encode_query([(key, value)], encoding)
        if self._query:
            self._query = f"{self._query}&{pair}"
        else:
            self._query = pair

    def reset_query(self) -> None:
        self._query = ""

    @property
    def fragment(self) -> str:
        return self._fragment

    @fragment.setter
    def fragment(self, fragment: str) -> None:
        self._fragment = fragment

    # Rendering

    def get_url(self) -> str:
        """Render the canonical URL from the current components."""
        parts = [self._scheme, "://", self.authority, self._path]
        if self._query:
            parts.append("?" + self._query)
        if self._fragment:
            parts.append("#" + self._fragment)
        return "".join(parts)

    def __str__(self) -> str:
        return self.get_url()

    def __repr__(self) -> str:
        return f"Url({self.get_url()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Url):
            return NotImplemented
        return self.get_url() == other.get_url()
