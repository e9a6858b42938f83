"""Per-region health tracking across scrape runs."""

from datetime import datetime
from typing import Any, Callable

import structlog

from .models import FetchStats

logger = structlog.get_logger()


class RegionHealthMonitor:
    """Track which regions fetched cleanly on their latest attempt.

    A scheduler that calls the scraper repeatedly can keep one monitor
    around to spot regions that keep failing.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.status: dict[str, dict[str, Any]] = {}

    def record(self, stats: FetchStats) -> None:
        """Record the outcome of one region fetch.

        Args:
            stats: Stats returned by the region fetcher
        """
        previous = self.status.get(stats.source, {})
        healthy = stats.status == "success"
        consecutive = 0 if healthy else previous.get("consecutive_failures", 0) + 1

        self.status[stats.source] = {
            "healthy": healthy,
            "last_check": self.clock().isoformat(),
            "event_count": stats.count,
            "consecutive_failures": consecutive,
            "last_error": stats.error_message,
        }

        if not healthy:
            logger.warning(
                "region_unhealthy",
                region=stats.source,
                consecutive_failures=consecutive,
                error=stats.error_message,
            )

    def is_healthy(self, region: str) -> bool:
        """Regions never seen are assumed healthy."""
        return self.status.get(region, {}).get("healthy", True)

    def get_region_status(self, region: str) -> dict[str, Any] | None:
        return self.status.get(region)

    def get_unhealthy_regions(self) -> list[str]:
        return [name for name, s in self.status.items() if not s["healthy"]]

    def get_status(self) -> dict[str, Any]:
        """Get full health report with a summary count."""
        unhealthy = len(self.get_unhealthy_regions())
        return {
            "timestamp": self.clock().isoformat(),
            "summary": {
                "healthy": len(self.status) - unhealthy,
                "unhealthy": unhealthy,
                "total": len(self.status),
            },
            "regions": self.status,
        }

    def reset(self) -> None:
        self.status.clear()
