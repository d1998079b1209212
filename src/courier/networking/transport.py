"""Transport seam between HttpRequest and the network.

HttpRequest renders a ``TransportContext`` and hands it to a ``Transport``.
The transport performs the exchange and returns the body together with the
raw status and header lines exactly as received, one status line per
response of a redirect chain. The default implementation is backed by
``requests``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

import requests

from .config import HttpClientConfig

logger = logging.getLogger(__name__)

# Called with (bytes received so far, total bytes announced or None).
ProgressCallback = Callable[[int, Optional[int]], None]

_HTTP_VERSIONS = {9: "0.9", 10: "1.0", 11: "1.1", 20: "2"}


class TransportFailure(Exception):
    """Raised by a transport when the exchange could not be performed."""


@dataclass(frozen=True)
class TransportContext:
    """Everything a transport needs to perform one request."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...]
    body: str
    follow_redirects: bool
    max_redirects: int
    progress_callback: ProgressCallback | None = None

    @property
    def header_block(self) -> str:
        return "".join(f"{name}: {value}\r\n" for name, value in self.headers)


@dataclass(frozen=True)
class TransportResult:
    body: str
    header_lines: tuple[str, ...]


class Transport(Protocol):
    def exchange(self, context: TransportContext) -> TransportResult | None:
        """Perform the request.

        Returns None when the exchange produced no data at all, and raises
        TransportFailure when it failed.
        """
        ...


def _http_version(response: requests.Response) -> str:
    return _HTTP_VERSIONS.get(getattr(response.raw, "version", 11), "1.1")


def _header_items(response: requests.Response) -> Iterable[tuple[str, str]]:
    # urllib3 keeps repeated headers apart; requests joins them with commas.
    raw_headers = getattr(response.raw, "headers", None)
    iteritems = getattr(raw_headers, "iteritems", None)
    if callable(iteritems):
        return list(iteritems())
    return list(response.headers.items())


def header_lines(response: requests.Response) -> list[str]:
    """Rebuild the wire status and header lines of a redirect chain."""
    lines: list[str] = []
    for hop in [*response.history, response]:
        version = _http_version(hop)
        status_line = f"HTTP/{version} {hop.status_code} {hop.reason or ''}"
        lines.append(status_line.rstrip())
        lines.extend(f"{name}: {value}" for name, value in _header_items(hop))
    return lines


def _decode(content: bytes, encoding: str | None) -> str:
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class RequestsTransport:
    """Transport backed by a ``requests.Session``."""

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._session = session or requests.Session()
        if self._config.user_agent:
            self._session.headers["User-Agent"] = self._config.user_agent
        self._session.headers.update(self._config.default_headers)

    @property
    def session(self) -> requests.Session:
        return self._session

    def _read_body(
        self,
        response: requests.Response,
        progress_callback: ProgressCallback | None,
    ) -> bytes | None:
        if progress_callback is None:
            return response.content

        total: int | None
        try:
            total = int(response.headers["Content-Length"])
        except (KeyError, ValueError):
            total = None
        received = 0
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=self._config.chunk_size):
            chunks.append(chunk)
            received += len(chunk)
            progress_callback(received, total)
        return b"".join(chunks)

    def exchange(self, context: TransportContext) -> TransportResult | None:
        self._session.max_redirects = context.max_redirects
        timeout = self._config.timeout()
        logger.debug(
            "%s %s (timeout=%s)", context.method, context.url, timeout
        )
        try:
            response = self._session.request(
                context.method,
                context.url,
                headers=dict(context.headers),
                data=context.body.encode("utf-8") if context.body else None,
                timeout=timeout,
                allow_redirects=context.follow_redirects,
                verify=self._config.verify_tls,
                stream=context.progress_callback is not None,
            )
            try:
                content = self._read_body(response, context.progress_callback)
            finally:
                response.close()
        except requests.exceptions.RequestException as exc:
            # Timeouts included: the message is all the caller gets.
            raise TransportFailure(str(exc)) from exc

        if content is None:
            return None
        return TransportResult(
            body=_decode(content, response.encoding),
            header_lines=tuple(header_lines(response)),
        )
