"""Courier networking layer."""

from .config import HttpClientConfig
from .diagnostics import DebugChannel
from .errors import (
    ConfigurationError,
    HttpClientError,
    MalformedUrlError,
    MissingCapabilityError,
    NoUrlError,
    TransportError,
    UnsupportedMethodError,
    UnsupportedSchemeError,
)
from .headers import Multiple, Single, normalize_header_name
from .request import HttpRequest, Method
from .response import HttpResponse
from .transport import (
    RequestsTransport,
    Transport,
    TransportContext,
    TransportFailure,
    TransportResult,
)
from .url import QueryEncoding, Url

__all__ = [
    "ConfigurationError",
    "DebugChannel",
    "HttpClientConfig",
    "HttpClientError",
    "HttpRequest",
    "HttpResponse",
    "MalformedUrlError",
    "Method",
    "MissingCapabilityError",
    "Multiple",
    "NoUrlError",
    "QueryEncoding",
    "RequestsTransport",
    "Single",
    "Transport",
    "TransportContext",
    "TransportError",
    "TransportFailure",
    "TransportResult",
    "UnsupportedMethodError",
    "UnsupportedSchemeError",
    "Url",
    "normalize_header_name",
]
