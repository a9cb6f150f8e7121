"""Domain value objects describing zones, time windows and log records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOKI_JOB_LABEL = "cloudflare-logpull-exporter"

# Fields requested from Logpull for response aggregation, in label order.
RESPONSE_FIELDS: Tuple[str, ...] = (
    "ClientRequestHost",
    "EdgeResponseStatus",
    "OriginResponseStatus",
)

RESPONSE_LABELS: Tuple[str, ...] = (
    "client_request_host",
    "edge_response_status",
    "origin_response_status",
)


class Zone(BaseModel):
    """A Cloudflare zone, identified by its opaque id and human-readable name."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class TimeWindow(BaseModel):
    """Half-open ``[start, end)`` range of log timestamps."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "TimeWindow":
        if self.start >= self.end:
            raise ValueError("start must be earlier than end")
        return self


class ResponseRecord(BaseModel):
    """Projection of a Logpull record onto the response-aggregation fields.

    Fields that are absent or ``null`` decode to their zero values. Values of
    the wrong JSON type are rejected rather than coerced.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    client_request_host: str = Field(default="", alias="ClientRequestHost")
    edge_response_status: int = Field(default=0, alias="EdgeResponseStatus")
    origin_response_status: int = Field(default=0, alias="OriginResponseStatus")

    @field_validator("client_request_host", mode="before")
    @classmethod
    def null_host_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("edge_response_status", "origin_response_status", mode="before")
    @classmethod
    def null_status_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def key(self) -> Tuple[str, str, str]:
        return (
            self.client_request_host,
            str(self.edge_response_status),
            str(self.origin_response_status),
        )


class LogMetadata(BaseModel):
    """Only the parts of a Logpull record needed to order it."""

    model_config = ConfigDict(strict=True)

    edge_end_timestamp: int = Field(default=0, alias="EdgeEndTimestamp")

    @field_validator("edge_end_timestamp", mode="before")
    @classmethod
    def null_timestamp_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


@dataclass(frozen=True)
class LogLine:
    """A raw log line paired with its nanosecond timestamp."""

    timestamp_ns: int
    line: str

    def to_value(self) -> List[str]:
        return [str(self.timestamp_ns), self.line]


@dataclass(frozen=True)
class LokiStream:
    """A labeled, ordered batch of log lines pushed to Loki as one unit."""

    labels: Mapping[str, str]
    values: Tuple[LogLine, ...]

    @classmethod
    def for_zone(cls, zone: Zone, values: Tuple[LogLine, ...]) -> "LokiStream":
        return cls(labels={"job": LOKI_JOB_LABEL, "zone": zone.name}, values=values)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "stream": dict(self.labels),
            "values": [value.to_value() for value in self.values],
        }
