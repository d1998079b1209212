"""Outgoing HTTP request builder.

An ``HttpRequest`` owns the target ``Url``, the method, the outgoing headers
and the body. ``send()`` renders them into a ``TransportContext``, lets the
transport perform the exchange, and parses what comes back into a fresh
``HttpResponse``. Any reconfiguration discards the previous response.

    request = HttpRequest("http://www.example.com/search")
    request.set_method("POST")
    request.set_post_values({"q": "xxx"})
    response = request.send()
    response.status, response.get_header("content-type")
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

from .config import HttpClientConfig
from .errors import (
    ConfigurationError,
    NoUrlError,
    TransportError,
    UnsupportedMethodError,
)
from .headers import normalize_header_name
from .response import HttpResponse
from .transport import (
    ProgressCallback,
    RequestsTransport,
    Transport,
    TransportContext,
    TransportFailure,
)
from .url import QueryEncoding, Url, check_scheme, encode_query

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Method(str, Enum):
    GET = "GET"
    POST = "POST"


def _check_method(method: str | Method) -> Method:
    name = method.value if isinstance(method, Method) else method.upper()
    try:
        return Method(name)
    except ValueError:
        raise UnsupportedMethodError(
            f"method not implemented: {name}"
        ) from None


class HttpRequest:
    """Builder and sender of one HTTP request at a time."""

    def __init__(
        self,
        url: str | Url | None = None,
        method: str | Method = Method.GET,
        *,
        config: HttpClientConfig | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create a new HttpRequest.

        Args:
            url: Target URL, as a string to parse or a prepared Url.
            method: HTTP method, GET or POST.
            config: Redirect policy defaults and transport settings.
            transport: Transport performing the exchange; a RequestsTransport
                built from ``config`` when omitted.
            logger: Logger receiving diagnostic output.
        """
        self._config = config or HttpClientConfig()
        self._transport: Transport = (
            transport or RequestsTransport(self._config)
        )
        self._logger = logger or logging.getLogger(__name__)
        self._url: Url | None = None
        self._method = Method.GET
        # normalized name -> (name as given, value)
        self._headers: dict[str, tuple[str, str]] = {}
        self._content = ""
        self._follow_redirects = self._config.follow_redirects
        self._max_redirects = self._config.max_redirects
        self._progress_callback: ProgressCallback | None = None
        self._response: HttpResponse | None = None

        if url is not None:
            self.set_url(url)
        self.set_method(method)
        self.set_content("")

    # URL

    @property
    def url(self) -> Url | None:
        return self._url

    def set_url(self, url: str | Url) -> None:
        """Set the target URL.

        Raises:
            MalformedUrlError: the string cannot be parsed.
            UnsupportedSchemeError: the scheme is not supported.
        """
        self._url = url if isinstance(url, Url) else Url.parse(url)
        self._response = None
        self._logger.debug("url: %s", self._url)

    # Method

    @property
    def method(self) -> str:
        return self._method.value

    def set_method(self, method: str | Method) -> None:
        """Set the method; POST defaults the content type to form encoding.

        Raises:
            UnsupportedMethodError: the method is neither GET nor POST.
        """
        self._method = _check_method(method)
        self._logger.debug("setting method to %s", self._method.value)
        has_content_type = self.get_header("Content-Type") is not None
        if self._method is Method.POST and not has_content_type:
            self.set_content_type(FORM_CONTENT_TYPE)
        self._response = None

    # Headers

    @property
    def headers(self) -> dict[str, str]:
        return {name: value for name, value in self._headers.values()}

    def get_header(self, name: str) -> str | None:
        entry = self._headers.get(normalize_header_name(name))
        return entry[1] if entry is not None else None

    def set_header(
        self,
        name_or_headers: str | Mapping[str, str],
        value: str | None = None,
    ) -> None:
        """Set one header, or every header of a mapping.

        Later values replace earlier ones for the same case-insensitive name.
        """
        if isinstance(name_or_headers, str):
            if value is None:
                raise TypeError("set_header() needs a value for one header")
            self._set_single_header(name_or_headers, value)
        else:
            for name, header_value in name_or_headers.items():
                self._set_single_header(name, header_value)
        self._response = None

    def _set_single_header(self, name: str, value: str) -> None:
        self._logger.debug("setting header: %s: %s", name.strip(), value)
        self._headers[normalize_header_name(name)] = (name.strip(), str(value))

    def remove_header(self, name: str) -> None:
        self._headers.pop(normalize_header_name(name), None)
        self._response = None

    def reset_headers(self) -> None:
        self._headers = {}
        self._response = None

    def set_content_type(self, content_type: str) -> None:
        self.set_header("Content-Type", content_type)

    def set_user_agent(self, user_agent: str) -> None:
        self.set_header("User-Agent", user_agent)

    # Content

    @property
    def content(self) -> str:
        return self._content

    def set_content(self, content: str) -> None:
        """Set the body and keep Content-Length in step with it."""
        self._content = content
        self.set_header("Content-Length", str(len(content.encode("utf-8"))))

    def set_post_values(self, values: Mapping[str, Any]) -> None:
        """Form-encode ``values`` and use them as the body."""
        self.set_content(encode_query(values, QueryEncoding.RFC1738))

    # Configuration

    @property
    def follow_redirects(self) -> bool:
        return self._follow_redirects

    @property
    def max_redirects(self) -> int:
        return self._max_redirects

    def set_config(
        self,
        name_or_config: str | Mapping[str, Any],
        value: Any = None,
    ) -> None:
        """Set ``follow_redirects`` and/or ``max_redirects``.

        Raises:
            ConfigurationError: an unknown key was supplied.
        """
        if isinstance(name_or_config, str):
            items = [(name_or_config, value)]
        else:
            items = list(name_or_config.items())
        for name, item_value in items:
            self._set_config_item(name, item_value)
        self._response = None

    def _set_config_item(self, name: str, value: Any) -> None:
        if name == "follow_redirects":
            self._follow_redirects = bool(value)
        elif name == "max_redirects":
            if int(value) < 0:
                raise ValueError("max_redirects must be >= 0")
            self._max_redirects = int(value)
        else:
            raise ConfigurationError(f"unknown parameter: {name}")

    def set_progress_callback(self, callback: ProgressCallback | None) -> None:
        self._progress_callback = callback

    # Sending

    @property
    def response(self) -> HttpResponse | None:
        """Response of the last send, None once the request is changed."""
        return self._response

    def render_context(self) -> TransportContext:
        """Render the request into what the transport consumes.

        Raises:
            NoUrlError: no URL has been set.
            UnsupportedSchemeError: the URL was built without a usable scheme.
            UnsupportedMethodError: the method is not supported.
        """
        if self._url is None:
            raise NoUrlError("no valid url provided")
        check_scheme(self._url.scheme)
        method = _check_method(self._method)
        self._set_single_header("Host", self._url.host_and_port)
        return TransportContext(
            method=method.value,
            url=self._url.get_url(),
            headers=tuple(self._headers.values()),
            body=self._content,
            follow_redirects=self._follow_redirects,
            max_redirects=self._max_redirects,
            progress_callback=self._progress_callback,
        )

    def send(self) -> HttpResponse:
        """Perform the request and return the parsed response.

        Raises:
            NoUrlError: no URL has been set.
            UnsupportedMethodError: the method is not supported.
            TransportError: the transport failed or returned no data.
        """
        self._response = None
        context = self.render_context()
        self._logger.debug("sending %s %s", context.method, context.url)
        try:
            result = self._transport.exchange(context)
        except TransportFailure as exc:
            self._logger.debug("transport failed: %s", exc)
            raise TransportError(str(exc)) from exc
        if result is None:
            raise TransportError("no data received")

        response = HttpResponse()
        response.set_content(result.body)
        response.set_headers(result.header_lines)
        self._logger.debug(
            "got a response: %s %s", response.status, response.reason_phrase
        )
        self._response = response
        return response

    def __str__(self) -> str:
        if self._response is None:
            return ""
        return str(self._response)
