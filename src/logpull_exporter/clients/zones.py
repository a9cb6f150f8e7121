"""Zone lookup against the Cloudflare zones API."""

from __future__ import annotations

from typing import Any, List, Sequence

import httpx

from logpull_exporter.domain.exceptions import ZoneLookupError
from logpull_exporter.domain.models import Zone

from .base import BaseClient, ClientConfig, Credentials

ZONES_PATH = "/zones"


class ZoneResolver(BaseClient):
    """Resolves zone names to their opaque ids, once, at startup."""

    SERVICE = "zones"

    def __init__(
        self,
        http_client: httpx.Client,
        config: ClientConfig,
        credentials: Credentials,
    ) -> None:
        super().__init__(http_client, config)
        self._credentials = credentials

    def resolve(self, names: Sequence[str]) -> List[Zone]:
        zones = []
        for raw_name in names:
            name = raw_name.strip()
            zones.append(Zone(id=self.zone_id_by_name(name), name=name))
        return zones

    def zone_id_by_name(self, name: str) -> str:
        headers = {"Accept": "application/json"}
        headers.update(self._credentials.headers())
        request = self._http.build_request(
            "GET",
            self.config.url(ZONES_PATH),
            params={"name": name},
            headers=headers,
            timeout=self.config.timeout,
        )
        response = self._send(request)
        self._raise_for_status(response)

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise ZoneLookupError(
                "zone lookup returned malformed JSON", context={"zone": name}
            ) from exc

        if not isinstance(data, dict) or not data.get("success", False):
            errors = data.get("errors") if isinstance(data, dict) else None
            raise ZoneLookupError(
                "zone lookup was unsuccessful",
                context={"zone": name, "errors": errors},
            )

        result = data.get("result") or []
        if not isinstance(result, list) or not all(
            isinstance(zone, dict) for zone in result
        ):
            raise ZoneLookupError(
                "zone lookup returned an unexpected result", context={"zone": name}
            )

        matches = [zone for zone in result if zone.get("name") == name]
        if not matches:
            raise ZoneLookupError("zone could not be found", context={"zone": name})
        if len(matches) > 1:
            raise ZoneLookupError("ambiguous zone name", context={"zone": name})

        zone_id = matches[0].get("id")
        if not isinstance(zone_id, str) or not zone_id:
            raise ZoneLookupError("zone has no id", context={"zone": name})
        self.logger.info("zone_resolved", extra={"zone": name, "zone_id": zone_id})
        return zone_id
