"""Error types raised by the Courier networking layer."""

from __future__ import annotations


class HttpClientError(Exception):
    """Base class for every error raised by the networking layer."""


class MalformedUrlError(HttpClientError, ValueError):
    """The URL string could not be decomposed into its components."""


class UnsupportedSchemeError(HttpClientError, ValueError):
    """The URL scheme is not one of the supported schemes."""


class MissingCapabilityError(HttpClientError):
    """The scheme needs a runtime capability that is not available."""


class UnsupportedMethodError(HttpClientError, ValueError):
    """The HTTP method is not supported by the request builder."""


class NoUrlError(HttpClientError):
    """A request was sent before any URL was configured."""


class ConfigurationError(HttpClientError, ValueError):
    """An unknown configuration key was supplied."""


class TransportError(HttpClientError):
    """The transport failed or returned no data.

    Timeouts are reported through this error as well: the transport message
    is the only information available and it does not reliably identify one.
    """
