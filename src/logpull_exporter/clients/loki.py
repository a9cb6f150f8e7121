"""Loki push API client."""

from __future__ import annotations

import gzip
import json
from typing import Sequence

import httpx

from logpull_exporter.domain.models import LokiStream

from .base import BaseClient, ClientConfig

LOKI_PUSH_PATH = "/loki/api/v1/push"


class LokiClient(BaseClient):
    """Pushes labeled log streams to a Loki endpoint."""

    SERVICE = "loki"

    def __init__(self, http_client: httpx.Client, config: ClientConfig) -> None:
        super().__init__(http_client, config)
        self._endpoint = self.config.url(LOKI_PUSH_PATH)

    def push(self, streams: Sequence[LokiStream]) -> None:
        body = self._encode(streams)
        headers = {
            "Content-Encoding": "gzip",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        request = self._http.build_request(
            "POST",
            self._endpoint,
            content=body,
            headers=headers,
            timeout=self.config.timeout,
        )
        response = self._send(request)
        self._raise_for_status(response)
        self.logger.debug(
            "loki_push",
            extra={"streams": len(streams), "compressed_bytes": len(body)},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _encode(streams: Sequence[LokiStream]) -> bytes:
        payload = {"streams": [stream.to_payload() for stream in streams]}
        return gzip.compress(json.dumps(payload).encode("utf-8"))
