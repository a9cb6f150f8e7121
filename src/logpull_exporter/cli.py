"""Command line entry point: serve metrics or pump logs into Loki."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from logpull_exporter.collection.window import compute_window
from logpull_exporter.core.config import ExporterConfig
from logpull_exporter.core.container import DIContainer
from logpull_exporter.core.server import serve
from logpull_exporter.domain.exceptions import ExporterError, PumpError

logger = logging.getLogger("logpull_exporter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logpull-exporter",
        description="Export Cloudflare Logpull data as Prometheus metrics or Loki streams.",
    )
    parser.add_argument(
        "--config",
        help="JSON or YAML configuration file; environment variables are used when omitted",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=("serve", "pump"),
        default="serve",
        help="serve /metrics (default) or push the latest window of logs to Loki once",
    )
    return parser


def load_config(path: Optional[str]) -> ExporterConfig:
    if path:
        return ExporterConfig.from_file(path)
    return ExporterConfig.from_env()


def run_serve(container: DIContainer) -> int:
    zones = container.resolve_zones()
    collector = container.create_collector(zones)
    registry = container.create_registry(collector)
    host, port = container.config.listen_address()
    serve(registry, host, port)
    return 0


def run_pump(container: DIContainer, now: Optional[datetime] = None) -> int:
    zones = container.resolve_zones()
    pump = container.create_pump()
    window = compute_window(
        now or datetime.now(timezone.utc), container.config.log_period
    )
    failures = 0
    for zone in zones:
        try:
            count = pump.pump(zone, window.start, window.end)
        except PumpError as exc:
            failures += 1
            logger.error("pump: %s", exc)
            continue
        logger.info("Pushed %d lines for zone %s", count, zone.name)
    return 1 if failures else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except (ExporterError, FileNotFoundError) as exc:
        logging.basicConfig(level=logging.INFO)
        logger.critical("configuration: %s", exc)
        return 2

    logging.basicConfig(
        level=config.log_level.upper(),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    container = DIContainer(config)
    try:
        if args.command == "pump":
            return run_pump(container)
        return run_serve(container)
    except ExporterError as exc:
        logger.critical("%s: %s", args.command, exc)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
