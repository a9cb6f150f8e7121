"""Decoding and grouping of Logpull records into response counts."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Tuple

from pydantic import ValidationError

from logpull_exporter.domain.exceptions import DecodeError
from logpull_exporter.domain.models import ResponseRecord

ResponseKey = Tuple[str, str, str]


def decode_response(line: str) -> ResponseRecord:
    try:
        return ResponseRecord.model_validate_json(line)
    except ValidationError as exc:
        raise DecodeError(
            "decoding log record failed", context={"line": line[:200]}
        ) from exc


class ResponseAggregator:
    """Counts records by their field-triple; one instance per zone and scrape."""

    def __init__(self) -> None:
        self._counts: Counter[ResponseKey] = Counter()

    def add(self, record: ResponseRecord) -> None:
        self._counts[record.key()] += 1

    def consume(self, lines: Iterable[str]) -> "ResponseAggregator":
        """Decode and count each non-blank line; stops at the first bad record."""

        for line in lines:
            if not line.strip():
                continue
            self.add(decode_response(line))
        return self

    def counts(self) -> dict[ResponseKey, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)
