"""Pulls raw logs from Logpull and pushes them into Loki."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import httpx
from pydantic import ValidationError

from logpull_exporter.domain.exceptions import DecodeError, PumpError, TransportError
from logpull_exporter.domain.interfaces import ILogSink, ILogSource, ILogStream
from logpull_exporter.domain.models import LogLine, LogMetadata, LokiStream, Zone

logger = logging.getLogger(__name__)


class LokiPump:
    """Moves one zone's logs for an explicit range from Logpull into Loki."""

    def __init__(self, source: ILogSource, sink: ILogSink) -> None:
        self._source = source
        self._sink = sink

    def pump(self, zone: Zone, start: datetime, end: datetime) -> int:
        """Forward every log line in ``[start, end)`` and return how many were pushed.

        Lines are ordered by ``EdgeEndTimestamp`` before pushing since
        Logpull makes no ordering guarantee. Any line whose metadata cannot
        be decoded fails the whole call; nothing is pushed in that case.
        """

        stream: Optional[ILogStream] = None
        try:
            stream = self._source.zone_logs(zone.id, None, 0, start, end)
            values = self._scan(stream.iter_lines())
        except (TransportError, httpx.HTTPError) as exc:
            raise PumpError(
                f"pulling logs for zone {zone.name}: {exc}",
                context={"zone_id": zone.id},
            ) from exc
        except DecodeError as exc:
            raise PumpError(
                f"decoding log metadata for zone {zone.name}: {exc}",
                context={"zone_id": zone.id},
            ) from exc
        finally:
            if stream is not None:
                stream.close()

        # Python's sort is stable, so equal timestamps keep their source order.
        values.sort(key=lambda value: value.timestamp_ns)

        try:
            self._sink.push([LokiStream.for_zone(zone, tuple(values))])
        except TransportError as exc:
            raise PumpError(
                f"pushing loki stream for zone {zone.name}: {exc}",
                context={"zone_id": zone.id},
            ) from exc

        logger.info(
            "loki_push_complete",
            extra={"zone": zone.name, "lines": len(values)},
        )
        return len(values)

    def _scan(self, lines: Iterable[str]) -> List[LogLine]:
        values: List[LogLine] = []
        for line in lines:
            if not line.strip():
                continue
            try:
                meta = LogMetadata.model_validate_json(line)
            except ValidationError as exc:
                raise DecodeError(
                    "malformed log metadata", context={"line": line[:200]}
                ) from exc
            values.append(LogLine(timestamp_ns=meta.edge_end_timestamp, line=line))
        return values
