"""
Event listing sources.

Each source implements:
- fetch_region_events(url, region_name, areas) -> (list[ScrapedEvent], FetchStats)
- Source-specific parsing and error isolation
"""

from .bonsai import (
    fetch_region_events,
    parse_event_listing,
    scrape_events_from_region,
)

__all__ = [
    "fetch_region_events",
    "parse_event_listing",
    "scrape_events_from_region",
]
