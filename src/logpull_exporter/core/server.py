"""Metrics exposition over HTTP."""

from __future__ import annotations

import logging
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app

logger = logging.getLogger(__name__)


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _LoggingHandler(WSGIRequestHandler):
    """Routes access logs through ``logging`` instead of stderr."""

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("http_request", extra={"request": format % args})


def create_server(
    registry: CollectorRegistry, host: str, port: int
) -> WSGIServer:
    """Build a server that runs one collection per inbound scrape on any path."""

    app = make_wsgi_app(registry)
    return make_server(
        host,
        port,
        app,
        server_class=_ThreadingWSGIServer,
        handler_class=_LoggingHandler,
    )


def serve(registry: CollectorRegistry, host: str, port: int) -> None:
    httpd = create_server(registry, host, port)
    logger.info("Listening on %s:%d", host or "0.0.0.0", port)
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()
