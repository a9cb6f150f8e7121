"""Contracts for the collaborators used by the collector and the pump."""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, Protocol, Sequence

from .models import LokiStream


class ILogStream(Protocol):
    """Readable stream of NDJSON log data that must be closed by its reader."""

    def iter_lines(self) -> Iterator[str]:
        """Yield decoded lines without buffering the whole body."""

    def close(self) -> None:
        """Release the underlying connection."""


class ILogSource(Protocol):
    """Fetches raw zone logs for a time range."""

    def zone_logs(
        self,
        zone_id: str,
        fields: Sequence[str] | None,
        count: int,
        start: datetime,
        end: datetime,
    ) -> ILogStream:
        """Return an open log stream or raise a ``TransportError``."""


class ILogSink(Protocol):
    """Accepts labeled log batches for ingestion."""

    def push(self, streams: Sequence[LokiStream]) -> None:
        """Transmit the streams or raise a ``TransportError``."""
