import pytest
from pydantic import ValidationError

from logpull_exporter.domain.models import (
    LOKI_JOB_LABEL,
    LogLine,
    LogMetadata,
    LokiStream,
    Zone,
)


def test_zone_is_immutable():
    zone = Zone(id="abc", name="example.org")
    with pytest.raises(ValidationError):
        zone.name = "other.org"


def test_log_metadata_reads_only_timestamp():
    meta = LogMetadata.model_validate_json(
        '{"EdgeEndTimestamp": 1700000000123456789, "RayID": "abc", "Unknown": {"x": 1}}'
    )
    assert meta.edge_end_timestamp == 1700000000123456789


def test_loki_stream_payload_uses_string_nanoseconds():
    zone = Zone(id="abc", name="example.org")
    stream = LokiStream.for_zone(
        zone, (LogLine(timestamp_ns=1700000000123456789, line='{"a":1}'),)
    )

    assert stream.to_payload() == {
        "stream": {"job": LOKI_JOB_LABEL, "zone": "example.org"},
        "values": [["1700000000123456789", '{"a":1}']],
    }
