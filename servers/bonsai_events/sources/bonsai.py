"""
bonsai.co.jp event listing scraper.

Cost: Free (uses httpx + BeautifulSoup)
Use Case: Regional bonsai exhibitions, sales and society meetings

Each listing page holds one "the_list" container per announcement, with the
title, body text and a permalink in child elements. The body text is loosely
structured ("会期／３月７日～８日 会場／… 主催／…"), so fields are mined from it
with the extractors.
"""

import re
from datetime import datetime
from typing import Optional, Sequence
from urllib.parse import urljoin

import httpx
import structlog
from bs4 import BeautifulSoup, Tag

from ..config.regions import SITE_ORIGIN
from ..extractors import (
    extract_admission_fee,
    extract_area,
    extract_locality,
    extract_organizer,
    extract_venue,
    has_sales,
    parse_date_range,
)
from ..extractors.dates import Clock
from ..models import FetchStats, ScrapedEvent

logger = structlog.get_logger()

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; BON-LOG/1.0; +https://www.bon-log.com)",
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "ja,en;q=0.9",
}
REQUEST_TIMEOUT = 30.0

# CSS class fragments used by the listing markup
SELECTORS = {
    "block": "the_list",
    "title": "the_title",
    "content": "the_content",
    "permalink": "the_permalink",
}

# Decorative bullets prefixed to titles: ●第10回盆栽展
TITLE_BULLET_RE = re.compile(r"^[●◆◇■□▲△▼▽★☆○◎]+\s*")


def parse_event_listing(
    html: str,
    source_region: str,
    source_url: str,
    areas: Sequence[str],
    clock: Clock = datetime.now,
) -> list[ScrapedEvent]:
    """
    Parse every event block on a listing page.

    Args:
        html: Raw page HTML
        source_region: Region name the page belongs to
        source_url: URL the page was fetched from
        areas: Prefectures of the region, in priority order
        clock: Time source for year inference

    Returns:
        List of events, in page order; blocks without a title are skipped
    """
    soup = BeautifulSoup(html, "html.parser")

    events: list[ScrapedEvent] = []
    for block in _find_event_blocks(soup):
        event = _parse_event_block(block, source_region, source_url, areas, clock)
        if event:
            events.append(event)

    return events


def _has_class_fragment(fragment: str):
    return lambda css_class: bool(css_class) and fragment in css_class


def _find_event_blocks(soup: BeautifulSoup) -> list[Tag]:
    """Find outermost event containers; nested matches belong to their parent."""
    is_block = _has_class_fragment(SELECTORS["block"])
    return [
        element for element in soup.find_all(class_=is_block)
        if element.find_parent(class_=is_block) is None
    ]


def _parse_event_block(
    block: Tag,
    source_region: str,
    source_url: str,
    areas: Sequence[str],
    clock: Clock,
) -> Optional[ScrapedEvent]:
    """Parse a single event block into a ScrapedEvent."""
    title = _extract_title(block)
    if not title:
        return None

    content = _extract_content(block)
    dates = parse_date_range(content, title, clock=clock)
    venue = extract_venue(content)

    return ScrapedEvent(
        title=title,
        start_date=dates.start_date,
        end_date=dates.end_date,
        area=extract_area(title, content, areas),
        locality=extract_locality(content, venue),
        venue=venue,
        organizer=extract_organizer(content),
        admission_fee=extract_admission_fee(content),
        has_sales=has_sales(content),
        description=content,
        external_url=_extract_permalink(block),
        source_region=source_region,
        source_url=source_url,
    )


def _extract_title(block: Tag) -> str:
    element = block.find(class_=_has_class_fragment(SELECTORS["title"]))
    if element is None:
        return ""
    title = element.get_text().strip()
    return TITLE_BULLET_RE.sub("", title)


def _extract_content(block: Tag) -> str:
    """Body text with tags removed and whitespace collapsed."""
    element = block.find(class_=_has_class_fragment(SELECTORS["content"]))
    if element is None:
        return ""
    return " ".join(element.get_text(" ").split())


def _extract_permalink(block: Tag) -> Optional[str]:
    """Absolute URL of the detail page, if the block links to one."""
    link = block.find("a", class_=_has_class_fragment(SELECTORS["permalink"]), href=True)
    if link is None:
        return None
    href = link["href"].strip()
    if not href:
        return None
    return urljoin(SITE_ORIGIN, href)


async def fetch_region_events(
    url: str,
    region_name: str,
    areas: Sequence[str],
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = datetime.now,
) -> tuple[list[ScrapedEvent], FetchStats]:
    """
    Fetch one region's listing page and parse its events.

    Never raises: HTTP errors and transport failures are logged and reported
    through the returned stats with an empty event list.

    Args:
        url: Listing page URL
        region_name: Region name recorded on each event
        areas: Prefectures of the region
        client: Shared client; a short-lived one is opened when omitted
        clock: Time source for year inference

    Returns:
        Tuple of (events, fetch_stats)
    """
    start_time = datetime.now()

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT, follow_redirects=True) as own_client:
                response = await own_client.get(url, headers=REQUEST_HEADERS)
        else:
            response = await client.get(url, headers=REQUEST_HEADERS)

        if not response.is_success:
            logger.warning(
                "region_http_error",
                region=region_name,
                url=url,
                status_code=response.status_code,
            )
            return [], FetchStats(
                source=region_name,
                count=0,
                status="error",
                error_message=f"HTTP {response.status_code}"
            )

        events = parse_event_listing(response.text, region_name, url, areas, clock=clock)

    except httpx.RequestError as e:
        logger.warning("region_fetch_failed", region=region_name, url=url, error=str(e))
        return [], FetchStats(
            source=region_name,
            count=0,
            status="error",
            error_message=f"Request failed: {str(e)}"
        )
    except Exception as e:
        logger.warning("region_fetch_failed", region=region_name, url=url, error=str(e))
        return [], FetchStats(
            source=region_name,
            count=0,
            status="error",
            error_message=str(e)
        )

    duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
    logger.info("region_scraped", region=region_name, url=url, count=len(events))

    return events, FetchStats(
        source=region_name,
        count=len(events),
        status="success",
        duration_ms=duration_ms
    )


async def scrape_events_from_region(
    url: str,
    region_name: str,
    areas: Sequence[str],
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = datetime.now,
) -> list[ScrapedEvent]:
    """Scrape a single region; returns [] if the page could not be fetched."""
    events, _ = await fetch_region_events(url, region_name, areas, client=client, clock=clock)
    return events
