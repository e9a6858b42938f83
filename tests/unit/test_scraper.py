"""Tests for scraping all regions in sequence."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from servers.bonsai_events.config.regions import BONSAI_EVENT_SOURCES, UnknownRegionError
from servers.bonsai_events.health import RegionHealthMonitor
from servers.bonsai_events.models import RegionSource
from servers.bonsai_events.scraper import (
    REQUEST_DELAY_SECONDS,
    scrape_all_events,
    scrape_all_events_with_stats,
    scrape_region,
)


def block(title: str, content: str = "") -> str:
    return (
        '<div class="the_list"><h3 class="the_title">'
        f'{title}</h3><div class="the_content">{content}</div></div>'
    )


@pytest.fixture
def regions() -> list[RegionSource]:
    return [
        RegionSource(
            region="北海道",
            url="https://www.bonsai.co.jp/event/event_category/hokkaido/",
            administrative_areas=("北海道",),
        ),
        RegionSource(
            region="東北",
            url="https://www.bonsai.co.jp/event/event_category/tohoku/",
            administrative_areas=("青森県", "宮城県"),
        ),
        RegionSource(
            region="関東",
            url="https://www.bonsai.co.jp/event/event_category/kanto/",
            administrative_areas=("東京都", "神奈川県"),
        ),
    ]


@pytest.fixture
def call_log() -> list[tuple]:
    return []


@pytest.fixture
def logged_client(mock_client, make_response, call_log):
    """Client that serves two events per URL and records each request."""

    async def fake_get(url, headers=None):
        call_log.append(("get", url))
        return make_response(url, 200, block(f"展示会A {url}") + block(f"展示会B {url}"))

    mock_client.get.side_effect = fake_get
    return mock_client


@pytest.fixture
def fake_sleep(call_log):
    async def record_sleep(delay):
        call_log.append(("sleep", delay))

    with patch("servers.bonsai_events.scraper.asyncio.sleep", side_effect=record_sleep) as mock_sleep:
        yield mock_sleep


class TestScrapeAllEvents:
    """Tests for scrape_all_events."""

    @pytest.mark.asyncio
    async def test_collects_events_from_every_region(self, regions, logged_client, fake_sleep, clock):
        events = await scrape_all_events(regions, client=logged_client, clock=clock)

        assert len(events) == 6
        assert [e.source_region for e in events] == ["北海道", "北海道", "東北", "東北", "関東", "関東"]

    @pytest.mark.asyncio
    async def test_fetches_sequentially_with_delay(self, regions, logged_client, fake_sleep, call_log, clock):
        await scrape_all_events(regions, client=logged_client, clock=clock)

        assert call_log == [
            ("get", regions[0].url),
            ("sleep", REQUEST_DELAY_SECONDS),
            ("get", regions[1].url),
            ("sleep", REQUEST_DELAY_SECONDS),
            ("get", regions[2].url),
        ]
        assert REQUEST_DELAY_SECONDS > 0

    @pytest.mark.asyncio
    async def test_custom_delay(self, regions, logged_client, fake_sleep, clock):
        await scrape_all_events(regions, delay=2.0, client=logged_client, clock=clock)

        assert fake_sleep.await_count == 2
        fake_sleep.assert_awaited_with(2.0)

    @pytest.mark.asyncio
    async def test_failed_region_is_isolated(self, regions, mock_client, make_response, fake_sleep, clock):
        async def fake_get(url, headers=None):
            if "tohoku" in url:
                return make_response(url, 500)
            return make_response(url, 200, block(f"展示会 {url}"))

        mock_client.get.side_effect = fake_get

        events = await scrape_all_events(regions, client=mock_client, clock=clock)

        assert [e.source_region for e in events] == ["北海道", "関東"]
        assert mock_client.get.await_count == 3

    @pytest.mark.asyncio
    async def test_network_error_is_isolated(self, regions, mock_client, make_response, fake_sleep, clock):
        async def fake_get(url, headers=None):
            if "hokkaido" in url:
                raise httpx.ConnectError("DNS failure")
            return make_response(url, 200, block(f"展示会 {url}"))

        mock_client.get.side_effect = fake_get

        events = await scrape_all_events(regions, client=mock_client, clock=clock)

        assert [e.source_region for e in events] == ["東北", "関東"]

    @pytest.mark.asyncio
    async def test_all_registered_regions(self, logged_client, fake_sleep, call_log, clock):
        events = await scrape_all_events(client=logged_client, clock=clock)

        gets = [url for kind, url in call_log if kind == "get"]
        assert gets == [s.url for s in BONSAI_EVENT_SOURCES]
        assert len(events) == 2 * len(BONSAI_EVENT_SOURCES)
        assert fake_sleep.await_count == len(BONSAI_EVENT_SOURCES) - 1

    @pytest.mark.asyncio
    async def test_empty_registry(self, logged_client, fake_sleep):
        assert await scrape_all_events([], client=logged_client) == []
        logged_client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_options_are_keyword_only(self, regions, logged_client):
        with pytest.raises(TypeError):
            await scrape_all_events(regions, 0.0, logged_client)
        with pytest.raises(TypeError):
            await scrape_region("関東", BONSAI_EVENT_SOURCES, logged_client)
        logged_client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_opens_one_client_for_the_run(self, regions, make_response, fake_sleep, clock):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__ = AsyncMock(return_value=mock_client.return_value)
            mock_client.return_value.__aexit__ = AsyncMock(return_value=None)
            mock_client.return_value.get = AsyncMock(
                side_effect=lambda url, headers=None: make_response(url, 200, block("展示会"))
            )

            events = await scrape_all_events(regions, clock=clock)

        assert len(events) == 3
        assert mock_client.call_count == 1


class TestScrapeAllEventsWithStats:
    """Tests for the stats-reporting variant."""

    @pytest.mark.asyncio
    async def test_reports_failed_regions(self, regions, mock_client, make_response, fake_sleep, clock):
        async def fake_get(url, headers=None):
            if "kanto" in url:
                return make_response(url, 503)
            return make_response(url, 200, block("展示会"))

        mock_client.get.side_effect = fake_get

        result = await scrape_all_events_with_stats(regions, client=mock_client, clock=clock)

        assert result.total == 2
        assert result.failed_regions == ["関東"]
        assert [s.status for s in result.stats] == ["success", "success", "error"]

    @pytest.mark.asyncio
    async def test_updates_health_monitor(self, regions, mock_client, make_response, fake_sleep, clock):
        async def fake_get(url, headers=None):
            if "kanto" in url:
                return make_response(url, 503)
            return make_response(url, 200, block("展示会"))

        mock_client.get.side_effect = fake_get
        monitor = RegionHealthMonitor(clock=clock)

        await scrape_all_events_with_stats(regions, client=mock_client, clock=clock, monitor=monitor)

        assert monitor.is_healthy("北海道") is True
        assert monitor.is_healthy("関東") is False
        assert monitor.get_unhealthy_regions() == ["関東"]


class TestScrapeRegion:
    """Tests for scraping a single region by id."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("region_id", ["関東", "kanto"])
    async def test_by_name_or_slug(self, region_id, logged_client, call_log, clock):
        events = await scrape_region(region_id, client=logged_client, clock=clock)

        assert len(events) == 2
        assert call_log == [("get", "https://www.bonsai.co.jp/event/event_category/kanto/")]
        assert events[0].source_region == "関東"

    @pytest.mark.asyncio
    async def test_unknown_region(self, logged_client):
        with pytest.raises(UnknownRegionError) as exc_info:
            await scrape_region("atlantis", client=logged_client)

        assert exc_info.value.region_id == "atlantis"
        logged_client.get.assert_not_awaited()
