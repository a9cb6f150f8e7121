import json
from datetime import timedelta
from pathlib import Path

import pytest

from logpull_exporter.clients.base import ApiKeyEmail, ApiToken, UserServiceKey
from logpull_exporter.core.config import ExporterConfig
from logpull_exporter.domain.exceptions import ConfigurationError

ENV_VARS = (
    "EXPORTER_LISTEN_ADDR",
    "CLOUDFLARE_API_EMAIL",
    "CLOUDFLARE_API_KEY",
    "CLOUDFLARE_API_TOKEN",
    "CLOUDFLARE_API_USER_SERVICE_KEY",
    "CLOUDFLARE_ZONE_NAMES",
    "EXPORTER_LOG_PERIOD",
    "EXPORTER_LOG_LEVEL",
    "EXPORTER_TIMEOUT_SECONDS",
    "LOKI_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_config_from_env_with_token(monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "tok")
    monkeypatch.setenv("CLOUDFLARE_ZONE_NAMES", "example.org, example.net ,")

    config = ExporterConfig.from_env()

    assert config.zone_names == ["example.org", "example.net"]
    assert config.credentials() == ApiToken("tok")
    assert config.listen_address() == ("", 9299)
    assert config.log_period == timedelta(minutes=1)
    assert config.loki_url is None


def test_config_from_env_overrides(monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_KEY", "key")
    monkeypatch.setenv("CLOUDFLARE_API_EMAIL", "ops@example.org")
    monkeypatch.setenv("CLOUDFLARE_ZONE_NAMES", "example.org")
    monkeypatch.setenv("EXPORTER_LISTEN_ADDR", "127.0.0.1:9300")
    monkeypatch.setenv("EXPORTER_LOG_PERIOD", "5m")
    monkeypatch.setenv("EXPORTER_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("LOKI_URL", "http://loki:3100")

    config = ExporterConfig.from_env()

    assert config.credentials() == ApiKeyEmail("key", "ops@example.org")
    assert config.listen_address() == ("127.0.0.1", 9300)
    assert config.log_period == timedelta(minutes=5)
    assert config.timeout_seconds == 12.5
    assert config.loki_url == "http://loki:3100"


def test_config_user_service_key():
    config = ExporterConfig(zone_names=["example.org"], api_user_service_key="usk")
    assert config.credentials() == UserServiceKey("usk")


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"api_token": "tok", "api_user_service_key": "usk"},
        {"api_token": "tok", "api_key": "key", "api_email": "ops@example.org"},
    ],
)
def test_config_requires_exactly_one_credential(kwargs):
    with pytest.raises(ConfigurationError):
        ExporterConfig(zone_names=["example.org"], **kwargs)


def test_config_requires_email_with_key():
    with pytest.raises(ConfigurationError):
        ExporterConfig(zone_names=["example.org"], api_key="key")


def test_config_requires_zone_names(monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "tok")
    with pytest.raises(ConfigurationError):
        ExporterConfig.from_env()


def test_config_rejects_out_of_range_period(monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "tok")
    monkeypatch.setenv("CLOUDFLARE_ZONE_NAMES", "example.org")
    monkeypatch.setenv("EXPORTER_LOG_PERIOD", "7d")
    with pytest.raises(ConfigurationError):
        ExporterConfig.from_env()


def test_config_rejects_bad_listen_address():
    with pytest.raises(ConfigurationError):
        ExporterConfig(
            zone_names=["example.org"], api_token="tok", listen_addr="localhost"
        )


def test_config_from_file_json(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "zone_names": "example.org,example.net",
                "api_token": "tok",
                "log_period": "2m",
            }
        )
    )

    config = ExporterConfig.from_file(str(path))

    assert config.zone_names == ["example.org", "example.net"]
    assert config.log_period == timedelta(minutes=2)


def test_config_from_file_yaml(tmp_path: Path):
    yaml = pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "zone_names": ["example.org"],
                "api_user_service_key": "usk",
                "loki_url": "http://loki:3100",
            }
        )
    )

    config = ExporterConfig.from_file(str(path))

    assert config.loki_url == "http://loki:3100"
    assert config.credentials() == UserServiceKey("usk")


def test_config_from_file_rejects_unknown_keys(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"zone_names": ["a"], "api_token": "t", "port": 1}))
    with pytest.raises(ConfigurationError):
        ExporterConfig.from_file(str(path))
