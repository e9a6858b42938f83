"""Shared pytest fixtures for bonsai event scraper tests."""

from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from servers.bonsai_events.models import RegionSource, ScrapedEvent


KANTO_URL = "https://www.bonsai.co.jp/event/event_category/kanto/"
KANTO_AREAS = ("茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県")

LISTING_HTML = """
<html>
<body>
<div class="event_list">
  <div class="the_list clearfix">
    <div class="the_inner">
      <h3 class="the_title">●第10回盆栽展（神奈川県）</h3>
      <div class="the_content">
        <p>会期／３月７日～８日</p>
        <p>会場／横浜市民ギャラリー　主催／日本盆栽協会 連絡先☎045-000-0000</p>
        <p>入場無料</p>
      </div>
      <a class="the_permalink" href="/event/12345/">詳細を見る</a>
    </div>
  </div>
  <div class="the_list clearfix">
    <div class="the_inner">
      <h3 class="the_title">◆春の盆栽即売会</h3>
      <div class="the_content">
        <p>4月10日（金）～12日（日）</p>
        <p>大宮ソニックシティ（さいたま市）</p>
        <p>即売コーナーあり 入場料：500円</p>
      </div>
    </div>
  </div>
  <div class="the_list clearfix">
    <div class="the_inner">
      <h3 class="the_title">  </h3>
      <div class="the_content"><p>5月1日 タイトルなし</p></div>
    </div>
  </div>
  <div class="the_list clearfix">
    <div class="the_inner">
      <h3 class="the_title">■</h3>
      <div class="the_content"><p>記号のみのタイトル</p></div>
    </div>
  </div>
  <div class="the_list clearfix">
    <div class="the_inner">
      <h3 class="the_title"><span>☆</span><strong>盆栽教室</strong></h3>
      <div class="the_content"><p>6月20日（土）開催 会場／（横浜市）で開催 参加無料</p></div>
      <a class="the_permalink" href="https://www.bonsai.co.jp/event/999/">詳細</a>
    </div>
  </div>
</div>
</body>
</html>
"""


def build_response(url: str, status_code: int = 200, text: str = "") -> httpx.Response:
    """Build a real httpx response for a canned GET."""
    return httpx.Response(status_code, text=text, request=httpx.Request("GET", url))


@pytest.fixture
def make_response():
    """Factory for canned httpx responses."""
    return build_response


@pytest.fixture
def fixed_now() -> datetime:
    """A scrape run in early January, before every listed event."""
    return datetime(2026, 1, 10, 9, 0)


@pytest.fixture
def clock(fixed_now: datetime):
    """Clock pinned to fixed_now."""
    return lambda: fixed_now


@pytest.fixture
def listing_html() -> str:
    """Listing page with 3 titled blocks and 2 untitled ones."""
    return LISTING_HTML


@pytest.fixture
def kanto() -> RegionSource:
    """The Kanto region source."""
    return RegionSource(region="関東", url=KANTO_URL, administrative_areas=KANTO_AREAS)


@pytest.fixture
def mock_client() -> MagicMock:
    """HTTP client stand-in whose get() is awaited."""
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    return client


@pytest.fixture
def sample_event() -> ScrapedEvent:
    """Provide a fully populated scraped event."""
    return ScrapedEvent(
        title="第10回盆栽展（神奈川県）",
        start_date=date(2026, 3, 7),
        end_date=date(2026, 3, 8),
        area="神奈川県",
        locality="横浜市",
        venue="横浜市民ギャラリー",
        organizer="日本盆栽協会",
        admission_fee="入場無料",
        has_sales=False,
        description="会期／３月７日～８日 会場／横浜市民ギャラリー",
        external_url="https://www.bonsai.co.jp/event/12345/",
        source_region="関東",
        source_url=KANTO_URL,
    )
