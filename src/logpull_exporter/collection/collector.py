"""Prometheus collector that aggregates Logpull records on every scrape."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Sequence

import httpx
from prometheus_client.metrics_core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
)
from prometheus_client.registry import Collector

from logpull_exporter.domain.exceptions import (
    CollectionError,
    ConfigurationError,
    ExporterError,
)
from logpull_exporter.domain.interfaces import ILogSource, ILogStream
from logpull_exporter.domain.models import (
    RESPONSE_FIELDS,
    RESPONSE_LABELS,
    TimeWindow,
    Zone,
)
from logpull_exporter.utils.durations import format_duration

from .aggregator import ResponseAggregator, ResponseKey
from .window import compute_window, validate_log_period

RESPONSES_METRIC = "cloudflare_logs_http_responses"
RESPONSES_HELP = "Cloudflare HTTP responses, obtained via Logpull API"
ERRORS_METRIC = "cloudflare_logs_errors_total"
ERRORS_HELP = "The number of errors that have occurred while collecting metrics"

ErrorHandler = Callable[[Exception], None]

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def log_collection_error(error: Exception) -> None:
    logger.error("collector: %s", error)


class LogpullCollector(Collector):
    """Pulls a window of logs per zone and reports per-response counts.

    Every ``collect`` call fetches the current window for all zones in
    parallel and waits for all of them before emitting anything. A zone
    that fails is reported to ``error_handler`` and counted in
    ``cloudflare_logs_errors_total``; the other zones are unaffected.
    """

    def __init__(
        self,
        source: Optional[ILogSource],
        zones: Sequence[Zone],
        log_period: timedelta,
        error_handler: Optional[ErrorHandler] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if source is None:
            raise ConfigurationError("invalid parameter: source must not be None")
        if not zones:
            raise ConfigurationError("invalid parameter: zones must not be empty")
        try:
            validate_log_period(log_period)
        except ValueError as exc:
            raise ConfigurationError(
                f"invalid parameter: {exc}",
                context={"log_period": str(log_period)},
            ) from exc

        self._source = source
        self._zones = list(zones)
        self._log_period = log_period
        self._error_handler = error_handler or log_collection_error
        self._clock = clock or _utcnow
        self._period_label = format_duration(log_period)
        self._errors_lock = threading.Lock()
        self._errors_total = 0

    @property
    def zones(self) -> List[Zone]:
        return list(self._zones)

    def describe(self) -> Iterable[Metric]:
        """Static descriptors used by the registry for collision checks."""

        return [
            self._response_family(),
            CounterMetricFamily(ERRORS_METRIC, ERRORS_HELP),
        ]

    def collect(self) -> Iterable[Metric]:
        window = compute_window(self._clock(), self._log_period)
        family = self._response_family()

        with ThreadPoolExecutor(
            max_workers=len(self._zones), thread_name_prefix="logpull-zone"
        ) as executor:
            futures = [
                executor.submit(self._collect_zone, zone, window)
                for zone in self._zones
            ]

        # A label set may appear only once per family; the first zone wins.
        emitted: set[ResponseKey] = set()
        for zone, future in zip(self._zones, futures):
            for key, count in future.result().items():
                if key in emitted:
                    logger.warning(
                        "duplicate_series",
                        extra={"zone": zone.name, "client_request_host": key[0]},
                    )
                    continue
                emitted.add(key)
                family.add_metric([*key, self._period_label], float(count))

        logger.debug(
            "scrape_complete",
            extra={
                "zones": len(self._zones),
                "samples": len(family.samples),
                "start": window.start.isoformat(),
                "end": window.end.isoformat(),
            },
        )
        yield family
        with self._errors_lock:
            errors_total = self._errors_total
        yield CounterMetricFamily(ERRORS_METRIC, ERRORS_HELP, value=errors_total)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _response_family(self) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            RESPONSES_METRIC,
            RESPONSES_HELP,
            labels=[*RESPONSE_LABELS, "period"],
        )

    def _collect_zone(self, zone: Zone, window: TimeWindow) -> dict[ResponseKey, int]:
        stream: Optional[ILogStream] = None
        try:
            stream = self._source.zone_logs(
                zone.id, RESPONSE_FIELDS, 0, window.start, window.end
            )
            return ResponseAggregator().consume(stream.iter_lines()).counts()
        except (ExporterError, httpx.HTTPError) as exc:
            self._report(zone, exc)
            return {}
        finally:
            if stream is not None:
                stream.close()

    def _report(self, zone: Zone, exc: Exception) -> None:
        error = CollectionError(
            f"collecting logs for zone {zone.name}: {exc}",
            context={"zone_id": zone.id},
        )
        error.__cause__ = exc
        with self._errors_lock:
            self._errors_total += 1
        self._error_handler(error)
