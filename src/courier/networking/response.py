"""Inbound HTTP response model.

The response is filled from the raw lines produced by a transport: status
lines (``HTTP/1.1 301 Moved Permanently``) and header lines
(``Name: value``). Parsing never raises; lines it cannot read are skipped.
"""

from __future__ import annotations

import re
from typing import Iterable

from .headers import HeaderValue, Multiple, Single, normalize_header_name
from .status import reason_phrase as lookup_reason_phrase

_STATUS_LINE = re.compile(r"HTTP/[0-9.]+\s+([0-9]+)")


class HttpResponse:
    """Status code, multi-valued headers and body of one HTTP response."""

    def __init__(self) -> None:
        self._status: int | None = None
        self._headers: dict[str, HeaderValue] = {}
        self._content: str | None = None

    @property
    def status(self) -> int | None:
        """Status code of the last status line seen, None before any."""
        return self._status

    # Headers

    def reset_headers(self) -> None:
        self._headers = {}

    def add_header(self, name: str, value: str) -> None:
        """Store a header, promoting it to multiple values on repetition."""
        key = normalize_header_name(name)
        value = value.strip()
        current = self._headers.get(key)
        if current is None:
            self._headers[key] = Single(value)
        else:
            self._headers[key] = current.add(value)

    def set_headers(self, lines: Iterable[str]) -> None:
        """Replace the headers with the ones found in raw response lines.

        When several status lines are present (one per response in a
        redirect chain) the last one sets the status code; without any the
        status is None.
        """
        self.reset_headers()
        self._status = None
        for line in lines:
            match = _STATUS_LINE.match(line)
            if match:
                self._status = int(match.group(1))
                continue
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                continue
            self.add_header(name, value)

    def header_value(self, name: str) -> HeaderValue | None:
        return self._headers.get(normalize_header_name(name))

    def get_header(
        self, name: str, return_single_as_string: bool = True
    ) -> str | list[str] | None:
        """Look up a header by case-insensitive name.

        Returns None when absent and a list when the header was received more
        than once. A header received once is returned as a string, or as a
        one-element list when ``return_single_as_string`` is False.
        """
        value = self.header_value(name)
        if value is None:
            return None
        if isinstance(value, Multiple):
            return value.values()
        if return_single_as_string:
            return value.value
        return value.values()

    @property
    def headers(self) -> dict[str, str | list[str]]:
        return {
            name: value.value if isinstance(value, Single) else value.values()
            for name, value in self._headers.items()
        }

    def get_cookie(
        self, return_single_as_string: bool = True
    ) -> str | list[str] | None:
        """Return the Set-Cookie header(s)."""
        return self.get_header("set-cookie", return_single_as_string)

    # Content

    @property
    def body(self) -> str | None:
        return self._content

    def set_content(self, content: str) -> None:
        self._content = content

    def append_content(self, content: str) -> None:
        if self._content is None:
            self._content = ""
        self._content += content

    def reset_content(self) -> None:
        self._content = None

    def _declared_length(self) -> int | None:
        value = self.header_value("content-length")
        if value is None:
            return None
        # Across a redirect chain the final response's value comes last.
        try:
            return int(value.values()[-1])
        except ValueError:
            return None

    def get_content_length(self) -> int:
        """Declared Content-Length, else measured body length, else 0."""
        declared = self._declared_length()
        if declared is not None:
            return declared
        if self._content is None:
            return 0
        return len(self._content.encode("utf-8"))

    content_length = property(get_content_length)

    def get_reason_phrase(self) -> str:
        return lookup_reason_phrase(self._status)

    reason_phrase = property(get_reason_phrase)

    def __str__(self) -> str:
        if self._content is None:
            return ""
        return self._content

    def __repr__(self) -> str:
        return f"<HttpResponse [{self._status}]>"
