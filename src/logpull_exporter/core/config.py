"""Exporter configuration management helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from logpull_exporter.clients.base import (
    CLOUDFLARE_BASE_URL,
    ApiKeyEmail,
    ApiToken,
    Credentials,
    UserServiceKey,
)
from logpull_exporter.collection.window import validate_log_period
from logpull_exporter.domain.exceptions import ConfigurationError
from logpull_exporter.utils.durations import parse_duration

DEFAULT_LISTEN_ADDR = ":9299"
DEFAULT_LOG_PERIOD = timedelta(minutes=1)


def _split_names(value: str | None) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def _str_to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid number: {value}") from exc


def _str_to_duration(value: str | None, default: timedelta) -> timedelta:
    if value is None:
        return default
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


@dataclass(frozen=True)
class ExporterConfig:
    """Immutable configuration object loaded from env or files."""

    zone_names: List[str] = field(default_factory=list)
    api_token: Optional[str] = None
    api_key: Optional[str] = None
    api_email: Optional[str] = None
    api_user_service_key: Optional[str] = None
    listen_addr: str = DEFAULT_LISTEN_ADDR
    log_period: timedelta = DEFAULT_LOG_PERIOD
    log_level: str = "INFO"
    loki_url: Optional[str] = None
    timeout_seconds: float = 30.0
    api_base_url: str = CLOUDFLARE_BASE_URL

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "ExporterConfig":
        return cls(
            zone_names=_split_names(os.getenv("CLOUDFLARE_ZONE_NAMES")),
            api_token=os.getenv("CLOUDFLARE_API_TOKEN") or None,
            api_key=os.getenv("CLOUDFLARE_API_KEY") or None,
            api_email=os.getenv("CLOUDFLARE_API_EMAIL") or None,
            api_user_service_key=os.getenv("CLOUDFLARE_API_USER_SERVICE_KEY") or None,
            listen_addr=os.getenv("EXPORTER_LISTEN_ADDR") or DEFAULT_LISTEN_ADDR,
            log_period=_str_to_duration(
                os.getenv("EXPORTER_LOG_PERIOD"), DEFAULT_LOG_PERIOD
            ),
            log_level=os.getenv("EXPORTER_LOG_LEVEL", "INFO"),
            loki_url=os.getenv("LOKI_URL") or None,
            timeout_seconds=_str_to_float(os.getenv("EXPORTER_TIMEOUT_SECONDS"), 30.0),
        )

    @classmethod
    def from_file(cls, path: str) -> "ExporterConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ConfigurationError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._normalize(data))

    def validate(self) -> None:
        schemes = [self.api_token, self.api_key, self.api_user_service_key]
        if sum(1 for value in schemes if value) != 1:
            raise ConfigurationError(
                "Must specify exactly one of CLOUDFLARE_API_TOKEN, "
                "CLOUDFLARE_API_KEY or CLOUDFLARE_API_USER_SERVICE_KEY."
            )
        if self.api_key and not self.api_email:
            raise ConfigurationError(
                "CLOUDFLARE_API_KEY specified without CLOUDFLARE_API_EMAIL. "
                "Both must be provided."
            )
        if not self.zone_names:
            raise ConfigurationError(
                "A comma-separated list of zone names must be specified in "
                "CLOUDFLARE_ZONE_NAMES"
            )
        try:
            validate_log_period(self.log_period)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be greater than zero")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown log level '{self.log_level}'")
        self.listen_address()

    def credentials(self) -> Credentials:
        if self.api_token:
            return ApiToken(self.api_token)
        if self.api_key:
            return ApiKeyEmail(self.api_key, self.api_email or "")
        return UserServiceKey(self.api_user_service_key or "")

    def listen_address(self) -> Tuple[str, int]:
        """Split ``listen_addr`` into host and port; an empty host binds all interfaces."""

        host, sep, port = self.listen_addr.rpartition(":")
        if not sep:
            raise ConfigurationError(f"Invalid listen address: {self.listen_addr}")
        try:
            return host.strip("[]"), int(port)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid listen address: {self.listen_addr}"
            ) from exc

    @classmethod
    def _normalize(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        normalized = dict(data)
        names = normalized.get("zone_names")
        if isinstance(names, str):
            normalized["zone_names"] = _split_names(names)
        period = normalized.get("log_period")
        if isinstance(period, str):
            normalized["log_period"] = _str_to_duration(period, DEFAULT_LOG_PERIOD)
        unknown = set(normalized) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        return normalized

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        import yaml

        return yaml.safe_load(raw) or {}
