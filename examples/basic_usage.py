"""Push the last ten minutes of logs for one zone into Loki."""

from datetime import datetime, timedelta, timezone

from logpull_exporter.core.config import ExporterConfig
from logpull_exporter.core.container import DIContainer


def main() -> None:
    config = ExporterConfig(
        zone_names=["example.org"],
        api_token="cf-demo-token",
        loki_url="http://localhost:3100",
    )
    container = DIContainer(config)
    [zone] = container.resolve_zones()

    end = datetime.now(timezone.utc) - timedelta(minutes=1)
    count = container.create_pump().pump(zone, end - timedelta(minutes=10), end)
    print("Zone:", zone.name)
    print("Lines pushed:", count)


if __name__ == "__main__":
    main()
