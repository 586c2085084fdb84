"""WSGI middleware that logs each request with its handling time."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable

_log = logging.getLogger(__name__)

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


def _request_uri(environ: dict) -> str:
    uri = environ.get("REQUEST_URI")
    if uri:
        return uri
    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
    query = environ.get("QUERY_STRING", "")
    return f"{path}?{query}" if query else path


def _format_duration(seconds: float) -> str:
    for limit, scale, unit in ((1e-6, 1e9, "ns"), (1e-3, 1e6, "µs"), (1.0, 1e3, "ms")):
        if seconds < limit:
            return f"{seconds * scale:.3f}".rstrip("0").rstrip(".") + unit
    return f"{seconds:.3f}".rstrip("0").rstrip(".") + "s"


def logger(inner: WSGIApp, name: str) -> WSGIApp:
    """Wrap a WSGI application so each call is logged as 'METHOD URI NAME TIME'."""

    def app(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        start = time.perf_counter()
        result = inner(environ, start_response)
        elapsed = time.perf_counter() - start
        _log.info(
            "%s %s %s %s",
            environ.get("REQUEST_METHOD", ""),
            _request_uri(environ),
            name,
            _format_duration(elapsed),
        )
        return result

    return app