"""
Server entry point for the bonsai event scraper.

This server provides tools for:
- Listing the regions that can be scraped
- Scraping every region for an import preview
- Scraping a single region for a targeted re-scrape

Run with: python -m servers.bonsai_events
"""

import asyncio
import sys
from datetime import datetime
from typing import Callable


class EventImportServer:
    """Tool-style interface over the scraper, returning JSON-ready dicts."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.tools = {
            "list_regions": self.list_regions,
            "scrape_all": self.scrape_all,
            "scrape_region": self.scrape_region,
        }

    async def list_regions(self) -> dict:
        """List regions available for scraping."""
        from .config.regions import list_regions

        return {"regions": list_regions()}

    async def scrape_all(self) -> dict:
        """Scrape all regions for an import preview."""
        from .scraper import scrape_all_events_with_stats

        result = await scrape_all_events_with_stats(clock=self.clock)
        if not result.events:
            return {"error": "No events found"}

        return {
            "events": self._to_importable(result.events),
            "stats": [s.model_dump() for s in result.stats],
            "failed_regions": result.failed_regions,
            "total": result.total,
        }

    async def scrape_region(self, region_id: str) -> dict:
        """
        Scrape a single region.

        Args:
            region_id: Region name (関東) or URL slug (kanto)
        """
        from .config.regions import UnknownRegionError
        from .scraper import scrape_region

        try:
            events = await scrape_region(region_id, clock=self.clock)
        except UnknownRegionError as e:
            return {"error": str(e)}

        if not events:
            return {"error": "No events found"}

        return {
            "events": self._to_importable(events),
            "total": len(events),
        }

    def _to_importable(self, events: list) -> list[dict]:
        from .models import to_importable

        return [
            to_importable(event, i, clock=self.clock).model_dump()
            for i, event in enumerate(events)
        ]


async def main():
    """Main entry point."""
    server = EventImportServer()

    print("Bonsai Event Scraper")
    print("Available tools:", list(server.tools.keys()))

    # For testing: scrape one region
    if "--test" in sys.argv:
        print("\n--- Running test scrape (関東) ---")
        result = await server.scrape_region("関東")
        if "error" in result:
            print(f"  {result['error']}")
            return
        print(f"Found {result['total']} events")
        for event in result["events"][:10]:
            print(f"  {event['start_date'] or '????-??-??'}  {event['area'] or ''}  {event['title']}")


if __name__ == "__main__":
    asyncio.run(main())
