"""Scoped diagnostic output for a logger.

A ``DebugChannel`` routes the records of one logger to stdout or to a file.
Only one sink is open at a time: opening a new one closes the previous
handler (and its file) first.

    with DebugChannel(logging.getLogger("courier")) as channel:
        channel.open_file("/tmp/courier.log")
        HttpRequest("http://example.com", logger=channel.logger).send()
"""

from __future__ import annotations

import logging
import sys
from types import TracebackType

LOG_FORMAT = "%(asctime)s %(process)-5d %(levelname).1s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DebugChannel:
    """Attach a single stdout or file handler to a logger."""

    def __init__(
        self, logger: logging.Logger, level: int = logging.DEBUG
    ) -> None:
        self._logger = logger
        self._level = level
        self._handler: logging.Handler | None = None
        self._previous_level = logger.level

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def handler(self) -> logging.Handler | None:
        return self._handler

    @property
    def channel(self) -> str | None:
        """Kind of the open sink ("stdout" or "file"), None when closed."""
        if self._handler is None:
            return None
        if isinstance(self._handler, logging.FileHandler):
            return "file"
        return "stdout"

    def _attach(self, handler: logging.Handler) -> None:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler.setLevel(self._level)
        self._logger.addHandler(handler)
        self._logger.setLevel(self._level)
        self._handler = handler

    def open_stdout(self) -> None:
        self.close()
        self._attach(logging.StreamHandler(sys.stdout))

    def open_file(self, path: str) -> None:
        self.close()
        self._attach(logging.FileHandler(path, mode="a", encoding="utf-8"))

    def close(self) -> None:
        if self._handler is None:
            return
        handler, self._handler = self._handler, None
        try:
            self._logger.removeHandler(handler)
        finally:
            handler.close()
            self._logger.setLevel(self._previous_level)

    def __enter__(self) -> DebugChannel:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
