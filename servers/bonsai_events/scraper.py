"""
Scrape orchestration across all registered regions.

Regions are fetched one at a time with a pause between requests so the
listing site never sees a burst of parallel traffic. A failed region only
costs its own events; the run always completes.
"""

import asyncio
from datetime import datetime
from typing import Optional, Sequence

import httpx
import structlog

from .config.regions import BONSAI_EVENT_SOURCES, UnknownRegionError, find_region
from .extractors.dates import Clock
from .health import RegionHealthMonitor
from .models import FetchStats, RegionSource, ScrapedEvent, ScrapeResult
from .sources.bonsai import REQUEST_TIMEOUT, fetch_region_events, scrape_events_from_region

logger = structlog.get_logger()

REQUEST_DELAY_SECONDS = 0.5


async def scrape_all_events_with_stats(
    sources: Sequence[RegionSource] = BONSAI_EVENT_SOURCES,
    *,
    delay: float = REQUEST_DELAY_SECONDS,
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = datetime.now,
    monitor: Optional[RegionHealthMonitor] = None,
) -> ScrapeResult:
    """
    Scrape every region sequentially and collect per-region stats.

    Args:
        sources: Regions to scrape, in order
        delay: Seconds to wait between consecutive region requests
        client: Shared HTTP client; one is opened for the run when omitted
        clock: Time source for year inference
        monitor: Optional health monitor updated after each region

    Returns:
        ScrapeResult with events from every region that succeeded
    """
    if client is None:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT, follow_redirects=True) as own_client:
            return await _scrape_sequentially(sources, delay, own_client, clock, monitor)
    return await _scrape_sequentially(sources, delay, client, clock, monitor)


async def _scrape_sequentially(
    sources: Sequence[RegionSource],
    delay: float,
    client: httpx.AsyncClient,
    clock: Clock,
    monitor: Optional[RegionHealthMonitor],
) -> ScrapeResult:
    all_events: list[ScrapedEvent] = []
    all_stats: list[FetchStats] = []
    failed: list[str] = []

    logger.info("scrape_started", regions=len(sources))

    for i, source in enumerate(sources):
        if i > 0 and delay > 0:
            await asyncio.sleep(delay)

        events, stats = await fetch_region_events(
            source.url,
            source.region,
            source.administrative_areas,
            client=client,
            clock=clock,
        )
        all_events.extend(events)
        all_stats.append(stats)
        if stats.status == "error":
            failed.append(source.region)
        if monitor is not None:
            monitor.record(stats)

    logger.info(
        "scrape_finished",
        regions=len(sources),
        events=len(all_events),
        failed_regions=failed,
    )

    return ScrapeResult(events=all_events, stats=all_stats, failed_regions=failed)


async def scrape_all_events(
    sources: Sequence[RegionSource] = BONSAI_EVENT_SOURCES,
    *,
    delay: float = REQUEST_DELAY_SECONDS,
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = datetime.now,
) -> list[ScrapedEvent]:
    """Scrape every registered region and return all events in region order."""
    result = await scrape_all_events_with_stats(sources, delay=delay, client=client, clock=clock)
    return result.events


async def scrape_region(
    region_id: str,
    sources: Sequence[RegionSource] = BONSAI_EVENT_SOURCES,
    *,
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = datetime.now,
) -> list[ScrapedEvent]:
    """
    Scrape one region by name or URL slug.

    Raises:
        UnknownRegionError: If region_id matches no registered region
    """
    source = find_region(region_id, sources)
    if source is None:
        raise UnknownRegionError(region_id)

    return await scrape_events_from_region(
        source.url,
        source.region,
        source.administrative_areas,
        client=client,
        clock=clock,
    )
