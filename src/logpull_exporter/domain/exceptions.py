"""Exception hierarchy for log collection and forwarding failures."""

from __future__ import annotations

from typing import Any, Mapping


class ExporterError(Exception):
    """Base class for all errors raised by the exporter."""

    default_message = "Exporter error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class ConfigurationError(ExporterError):
    """Invalid or missing startup parameters."""

    default_message = "Invalid configuration"


class TransportError(ExporterError):
    """An upstream API could not be reached or answered unsuccessfully."""

    default_message = "Upstream request failed"


class UpstreamHTTPError(TransportError):
    """Non-success HTTP response carrying the status code and raw body."""

    default_message = "Unexpected api response"

    def __init__(
        self,
        status_code: int,
        body: bytes,
        *,
        context: Mapping[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(
            f"unexpected api response: HTTP {status_code}: {text}", context=context
        )


class DecodeError(ExporterError):
    """A log record could not be decoded."""

    default_message = "Malformed log record"


class ZoneLookupError(ExporterError):
    """A zone name could not be resolved to exactly one zone id."""

    default_message = "Zone lookup failed"


class CollectionError(ExporterError):
    """Collecting metrics for a single zone failed."""

    default_message = "Zone collection failed"


class PumpError(ExporterError):
    """Pulling logs from Logpull or pushing them into Loki failed."""

    default_message = "Loki pump failed"
