"""Shared configuration, credentials and plumbing for the HTTP clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

import httpx

from logpull_exporter.domain.exceptions import TransportError, UpstreamHTTPError

CLOUDFLARE_BASE_URL = "https://api.cloudflare.com/client/v4"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration values shared by all API clients."""

    base_url: str
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"


@dataclass(frozen=True)
class ApiToken:
    """Scoped Cloudflare API token."""

    token: str

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must be provided")

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class ApiKeyEmail:
    """Legacy global API key paired with the account email."""

    key: str
    email: str

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key must be provided")
        if not self.email:
            raise ValueError("email must be provided alongside key")

    def headers(self) -> Dict[str, str]:
        return {"X-Auth-Key": self.key, "X-Auth-Email": self.email}


@dataclass(frozen=True)
class UserServiceKey:
    """Origin CA user service key."""

    key: str

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key must be provided")

    def headers(self) -> Dict[str, str]:
        return {"X-Auth-User-Service-Key": self.key}


Credentials = Union[ApiToken, ApiKeyEmail, UserServiceKey]


class BaseClient:
    """Holds the HTTP client, config and logger; maps transport failures."""

    SERVICE = "api"

    def __init__(
        self,
        http_client: httpx.Client,
        config: ClientConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._http = http_client
        self.config = config
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    def _send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        try:
            return self._http.send(request, stream=stream)
        except httpx.HTTPError as exc:
            raise TransportError(
                "performing api request failed",
                context={"service": self.SERVICE, "url": str(request.url)},
            ) from exc

    def _raise_for_status(
        self, response: httpx.Response, *, accept: range = range(200, 300)
    ) -> None:
        """Raise ``UpstreamHTTPError`` and release the response when status is not accepted."""

        if response.status_code in accept:
            return
        try:
            body = response.read()
        except httpx.HTTPError as exc:
            raise TransportError(
                "reading api response body failed",
                context={"service": self.SERVICE, "status_code": response.status_code},
            ) from exc
        finally:
            response.close()
        self.logger.debug(
            "upstream_error_response",
            extra={"service": self.SERVICE, "status_code": response.status_code},
        )
        raise UpstreamHTTPError(response.status_code, body)
