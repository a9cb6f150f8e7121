"""Cloudflare Logpull exporter: Prometheus metrics and Loki forwarding."""

from .collection.collector import LogpullCollector
from .core.container import DIContainer
from .pump.loki_pump import LokiPump

__all__ = [
    "LogpullCollector",
    "LokiPump",
    "DIContainer",
    "domain",
    "clients",
    "collection",
    "pump",
    "core",
    "utils",
]
