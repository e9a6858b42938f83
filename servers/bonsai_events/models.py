"""
Pydantic models for scraped event data.

These models define the core data types used throughout the scraper:
- RegionSource: One registered listing page and the prefectures it covers
- ScrapedEvent: One event block extracted from a listing page
- ImportableEvent: Client-facing form of a ScrapedEvent
- FetchStats / ScrapeResult: Bookkeeping for a scrape run
"""

from datetime import date, datetime
from typing import Callable, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, computed_field


class RegionSource(BaseModel):
    """A region's listing URL and the prefectures that belong to it."""

    model_config = ConfigDict(frozen=True)

    region: str
    url: str
    administrative_areas: tuple[str, ...]

    @property
    def slug(self) -> str:
        """Last path segment of the listing URL, e.g. 'kanto'."""
        parts = [p for p in urlparse(self.url).path.split("/") if p]
        return parts[-1] if parts else ""


class DateRange(BaseModel):
    """Start/end dates pulled from a block of text."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ScrapedEvent(BaseModel):
    """Represents a single event block from a listing page."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)

    # Timing
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # Location
    area: Optional[str] = None  # prefecture
    locality: Optional[str] = None  # city/ward/town/village
    venue: Optional[str] = None

    # Details
    organizer: Optional[str] = None
    admission_fee: Optional[str] = None  # free text, e.g. "入場無料", "入場料：500円"
    has_sales: bool = False
    description: str = ""
    external_url: Optional[str] = None

    # Source tracking
    source_region: str
    source_url: str


class ImportableEvent(BaseModel):
    """A scraped event in the shape handed to the import screen."""

    id: str  # temporary id, only meaningful within one preview
    title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    area: Optional[str] = None
    locality: Optional[str] = None
    venue: Optional[str] = None
    organizer: Optional[str] = None
    admission_fee: Optional[str] = None
    has_sales: bool = False
    description: str = ""
    external_url: Optional[str] = None
    source_region: str
    source_url: str


def to_importable(
    event: ScrapedEvent,
    index: int,
    clock: Callable[[], datetime] = datetime.now,
) -> ImportableEvent:
    """Convert a ScrapedEvent for the import screen.

    Args:
        event: Event to convert
        index: Position of the event in the scrape output
        clock: Time source used to stamp the temporary id

    Returns:
        ImportableEvent with ISO-8601 date strings
    """
    stamp = int(clock().timestamp() * 1000)
    data = event.model_dump(exclude={"start_date", "end_date"})
    return ImportableEvent(
        id=f"scraped-{index}-{stamp}",
        start_date=event.start_date.isoformat() if event.start_date else None,
        end_date=event.end_date.isoformat() if event.end_date else None,
        **data,
    )


class FetchStats(BaseModel):
    """Statistics from fetching one region."""

    source: str  # region name
    count: int
    status: str  # success, error
    duration_ms: Optional[int] = None
    error_message: Optional[str] = None


class ScrapeResult(BaseModel):
    """Result of scraping every registered region."""

    events: list[ScrapedEvent]
    stats: list[FetchStats]
    failed_regions: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def total(self) -> int:
        """Number of events across all regions."""
        return len(self.events)
