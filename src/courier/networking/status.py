"""Reason phrases for HTTP status codes, including common unofficial ones."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

REASON_PHRASES: Mapping[int, str] = MappingProxyType(
    {
        100: "Continue",
        101: "Switching Protocols",
        102: "Processing",
        103: "Early Hints",
        200: "OK",
        201: "Created",
        202: "Accepted",
        203: "Non-Authoritative Information",
        204: "No Content",
        205: "Reset Content",
        206: "Partial Content",
        207: "Multi-Status",
        208: "Already Reported",
        226: "IM Used",
        300: "Multiple Choices",
        301: "Moved Permanently",
        302: "Found",
        303: "See Other",
        304: "Not Modified",
        305: "Use Proxy",
        306: "Switch Proxy",
        307: "Temporary Redirect",
        308: "Permanent Redirect",
        400: "Bad Request",
        401: "Unauthorized",
        402: "Payment Required",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        406: "Not Acceptable",
        407: "Proxy Authentication Required",
        408: "Request Time-out",
        409: "Conflict",
        410: "Gone",
        411: "Length Required",
        412: "Precondition Failed",
        413: "Request Entity Too Large",
        414: "Request-URI Too Large",
        415: "Unsupported Media Type",
        416: "Range Not Satisfiable",
        417: "Expectation Failed",
        418: "I'm a teapot",
        419: "Page Expired (unofficial)",
        420: "Method Failure (unofficial)",
        421: "Misdirected Request",
        422: "Unprocessable Entity",
        423: "Locked",
        424: "Failed Dependency",
        425: "Too Early",
        426: "Upgrade Required",
        428: "Precondition Required",
        429: "Too Many Requests",
        431: "Request Header Fields Too Large",
        440: "Login Time-out (IIS)",
        450: "Blocked by Windows Parental Controls (unofficial)",
        451: "Unavailable For Legal Reasons",
        500: "Internal Server Error",
        501: "Not Implemented",
        502: "Bad Gateway",
        503: "Service Unavailable",
        504: "Gateway Time-out",
        505: "HTTP Version Not Supported",
        506: "Variant Also Negotiates",
        507: "Insufficient Storage",
        508: "Loop Detected",
        509: "Bandwidth Limit Exceeded (unofficial)",
        510: "Not Extended",
        511: "Network Authentication Required",
        520: "Unknown Error (Cloudflare)",
        521: "Web Server Is Down (Cloudflare)",
        522: "Connection Timed Out (Cloudflare)",
        523: "Origin Is Unreachable (Cloudflare)",
        524: "A Timeout Occurred (Cloudflare)",
        525: "SSL Handshake Failed (Cloudflare)",
        526: "Invalid SSL Certificate (unofficial)",
        527: "Railgun Error (Cloudflare)",
        530: "Origin DNS Error (Cloudflare)",
    }
)


def reason_phrase(status: int | None) -> str:
    """Return the reason phrase for ``status``, or "" when unknown."""

    if status is None:
        return ""
    return REASON_PHRASES.get(status, "")
