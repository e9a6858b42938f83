"""
Registry of bonsai.co.jp event listing pages.

One entry per region; each lists the prefectures that count as "in" the
region when matching event text.
"""

from typing import Any, Iterable, Optional

import structlog

from ..models import RegionSource
from .url_validator import SourceURLError, validate_source_url

log = structlog.get_logger(__name__)

SITE_ORIGIN = "https://www.bonsai.co.jp"
ALLOWED_DOMAINS = {"bonsai.co.jp"}


class RegistryError(ValueError):
    """Raised when a region registry config entry is invalid."""
    pass


class UnknownRegionError(LookupError):
    """Raised when a region id does not match any registered region."""

    def __init__(self, region_id: str):
        super().__init__(f"Unknown region '{region_id}'")
        self.region_id = region_id


def _source(region: str, slug: str, prefectures: list[str]) -> RegionSource:
    return RegionSource(
        region=region,
        url=f"{SITE_ORIGIN}/event/event_category/{slug}/",
        administrative_areas=tuple(prefectures),
    )


BONSAI_EVENT_SOURCES: tuple[RegionSource, ...] = (
    _source("北海道", "hokkaido", ["北海道"]),
    _source("東北", "tohoku", ["青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県"]),
    _source("関東", "kanto", ["茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県"]),
    _source("信越", "shinetsu", ["新潟県", "長野県"]),
    _source("北陸", "hokuriku", ["富山県", "石川県", "福井県"]),
    _source("東海", "tokai", ["岐阜県", "静岡県", "愛知県", "三重県"]),
    _source("近畿", "kinki", ["滋賀県", "京都府", "大阪府", "兵庫県", "奈良県", "和歌山県"]),
    _source("中国", "chugoku", ["鳥取県", "島根県", "岡山県", "広島県", "山口県"]),
    _source("四国", "shikoku", ["徳島県", "香川県", "愛媛県", "高知県"]),
    _source("九州", "kyusyu", ["福岡県", "佐賀県", "長崎県", "熊本県", "大分県", "宮崎県", "鹿児島県", "沖縄県"]),
)


def find_region(
    region_id: str,
    sources: Iterable[RegionSource] = BONSAI_EVENT_SOURCES,
) -> Optional[RegionSource]:
    """Find a region by name ('関東') or by its URL slug ('kanto')."""
    if not region_id:
        return None
    for source in sources:
        if source.region == region_id or region_id == source.slug:
            return source
    return None


def list_regions(sources: Iterable[RegionSource] = BONSAI_EVENT_SOURCES) -> list[dict[str, str]]:
    """List registered regions for a region picker."""
    return [
        {"id": source.region, "name": source.region, "url": source.url}
        for source in sources
    ]


def load_region_sources(
    config: dict[str, Any],
    allowed_domains: Optional[set[str]] = ALLOWED_DOMAINS,
) -> tuple[RegionSource, ...]:
    """
    Build a registry from a config mapping.

    Accepts either key for the prefecture list:

        {"regions": [{"region": "関東", "url": "https://...", "prefectures": [...]}]}

    Args:
        config: Raw config dict
        allowed_domains: Domains listing URLs must belong to (None allows any public host)

    Returns:
        Tuple of RegionSource in declared order

    Raises:
        RegistryError: If an entry is missing fields or has an invalid URL
    """
    entries = config.get("regions")
    if not isinstance(entries, list) or not entries:
        raise RegistryError("Config must contain a non-empty 'regions' list")

    sources = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise RegistryError(f"Region entry {i} must be a mapping")

        region = entry.get("region")
        if not region:
            raise RegistryError(f"Region entry {i} is missing 'region'")

        areas = entry.get("administrative_areas", entry.get("prefectures"))
        if not areas:
            raise RegistryError(f"Region '{region}' has no prefectures")

        try:
            url = validate_source_url(entry.get("url", ""), allowed_domains=allowed_domains)
        except SourceURLError as e:
            raise RegistryError(f"Region '{region}' has an invalid URL: {e}") from e

        sources.append(RegionSource(region=region, url=url, administrative_areas=tuple(areas)))

    log.info("region_registry_loaded", regions=[s.region for s in sources])
    return tuple(sources)
