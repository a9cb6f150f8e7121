"""Dependency injection container for building fully-wired exporter parts."""

from __future__ import annotations

from typing import Callable, List, Optional

import httpx
from prometheus_client import CollectorRegistry

from logpull_exporter.clients.base import ClientConfig
from logpull_exporter.clients.logpull import LogpullClient
from logpull_exporter.clients.loki import LokiClient
from logpull_exporter.clients.zones import ZoneResolver
from logpull_exporter.collection.collector import ErrorHandler, LogpullCollector
from logpull_exporter.core.config import ExporterConfig
from logpull_exporter.domain.exceptions import ConfigurationError
from logpull_exporter.domain.models import Zone
from logpull_exporter.pump.loki_pump import LokiPump


class DIContainer:
    """Factory helpers that assemble clients, the collector and the pump."""

    def __init__(
        self,
        config: ExporterConfig,
        *,
        http_client_factory: Optional[Callable[[ClientConfig], httpx.Client]] = None,
    ) -> None:
        self.config = config
        self._http_client_factory = (
            http_client_factory or self._build_http_client_factory()
        )
        self._api_config = ClientConfig(
            base_url=config.api_base_url, timeout=config.timeout_seconds
        )

    def create_logpull_client(self) -> LogpullClient:
        return LogpullClient(
            self._http_client_factory(self._api_config),
            self._api_config,
            self.config.credentials(),
        )

    def create_zone_resolver(self) -> ZoneResolver:
        return ZoneResolver(
            self._http_client_factory(self._api_config),
            self._api_config,
            self.config.credentials(),
        )

    def create_loki_client(self) -> LokiClient:
        if not self.config.loki_url:
            raise ConfigurationError("LOKI_URL must be specified to push logs to Loki")
        loki_config = ClientConfig(
            base_url=self.config.loki_url, timeout=self.config.timeout_seconds
        )
        return LokiClient(self._http_client_factory(loki_config), loki_config)

    def resolve_zones(self) -> List[Zone]:
        return self.create_zone_resolver().resolve(self.config.zone_names)

    def create_collector(
        self,
        zones: List[Zone],
        error_handler: Optional[ErrorHandler] = None,
    ) -> LogpullCollector:
        return LogpullCollector(
            self.create_logpull_client(),
            zones,
            self.config.log_period,
            error_handler,
        )

    def create_registry(self, collector: LogpullCollector) -> CollectorRegistry:
        registry = CollectorRegistry()
        registry.register(collector)
        return registry

    def create_pump(self) -> LokiPump:
        return LokiPump(self.create_logpull_client(), self.create_loki_client())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_http_client_factory() -> Callable[[ClientConfig], httpx.Client]:
        def factory(client_config: ClientConfig) -> httpx.Client:
            return httpx.Client(timeout=client_config.timeout)

        return factory
