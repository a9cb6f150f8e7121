"""Cloudflare Logpull API client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

import httpx

from .base import BaseClient, ClientConfig, Credentials

LOGPULL_PATH = "/zones/{zone_id}/logs/received"


def format_rfc3339(value: datetime) -> str:
    """Render ``value`` in UTC at second precision, e.g. ``2024-01-01T00:00:00Z``."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class LogpullClient(BaseClient):
    """Fetches NDJSON-encoded request logs for a zone."""

    SERVICE = "logpull"

    def __init__(
        self,
        http_client: httpx.Client,
        config: ClientConfig,
        credentials: Credentials,
    ) -> None:
        super().__init__(http_client, config)
        self._credentials = credentials

    def zone_logs(
        self,
        zone_id: str,
        fields: Optional[Sequence[str]],
        count: int,
        start: datetime,
        end: datetime,
    ) -> httpx.Response:
        """Open a streaming response of NDJSON log records.

        The returned response is still streaming; it is the caller's
        responsibility to close it when finished. A ``fields`` of ``None``
        requests the default field set and a ``count`` of zero requests
        every record in the range.
        """

        params: Dict[str, str] = {
            "start": format_rfc3339(start),
            "end": format_rfc3339(end),
        }
        if fields is not None:
            params["fields"] = ",".join(fields)
        if count:
            params["count"] = str(count)

        headers = {"Accept": "application/json"}
        headers.update(self._credentials.headers())

        request = self._http.build_request(
            "GET",
            self.config.url(LOGPULL_PATH.format(zone_id=zone_id)),
            params=params,
            headers=headers,
            timeout=self.config.timeout,
        )
        self.logger.debug(
            "logpull_request",
            extra={"zone_id": zone_id, "start": params["start"], "end": params["end"]},
        )
        response = self._send(request, stream=True)
        self._raise_for_status(response, accept=range(200, 201))
        return response
