"""
Field extractors for event block text.

Each extractor takes free text and returns a best-effort value, or None
(False for the sales flag) when nothing matches. None of them raise.
"""

import re
from typing import Optional, Sequence

# （神奈川県）
PAREN_PREFECTURE_RE = re.compile(r"（([^）]+[都道府県])）")

# 会場／上野公園 主催／... -> 上野公園
VENUE_RE = re.compile(r"会場[／/：:]\s*([^（(☎]+?)(?=[（(☎]|主催|連絡|$)")

# （横浜市）
PAREN_CITY_RE = re.compile(r"（([^）]+[市区町村])）")
LOOSE_CITY_RE = re.compile(r"([^\s（）]+[市区町村])")

ORGANIZER_RE = re.compile(r"主催[／/：:]\s*([^☎\n]+?)(?=連絡|☎|\n|$)")

# First match wins; the whole match is returned, not just the amount
ADMISSION_FEE_PATTERNS = [
    re.compile(r"入場無料"),
    re.compile(r"入場料[：:／/]?\s*([^\s、。]+)"),
    re.compile(r"入園料[：:／/]?\s*([^\s、。]+)"),
    re.compile(r"無料"),
]

SALES_KEYWORDS = ("即売", "販売", "売店")


def extract_area(title: str, content: str, areas: Sequence[str]) -> Optional[str]:
    """
    Find the prefecture an event belongs to.

    Checks the region's prefectures in declared order against title + content,
    then a parenthesized prefecture in the title. Falls back to the region's
    first prefecture so every event gets one.
    """
    text = f"{title} {content}"
    for area in areas:
        if area in text:
            return area

    match = PAREN_PREFECTURE_RE.search(title)
    if match:
        return match.group(1)

    return areas[0] if areas else None


def extract_venue(content: str) -> Optional[str]:
    """Text after a 会場 label, up to a bracket, 主催, 連絡 or ☎."""
    match = VENUE_RE.search(content)
    if match:
        return match.group(1).strip() or None
    return None


def extract_locality(content: str, venue: Optional[str] = None) -> Optional[str]:
    """Municipality from the venue text, or from the content when there is no venue."""
    text = venue or content

    match = PAREN_CITY_RE.search(text)
    if match:
        return match.group(1)

    match = LOOSE_CITY_RE.search(text)
    if match:
        return match.group(1)

    return None


def extract_organizer(content: str) -> Optional[str]:
    """Text after a 主催 label, up to 連絡, ☎ or a newline."""
    match = ORGANIZER_RE.search(content)
    if match:
        return match.group(1).strip() or None
    return None


def extract_admission_fee(content: str) -> Optional[str]:
    for pattern in ADMISSION_FEE_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(0)
    return None


def has_sales(content: str) -> bool:
    """True when the listing mentions on-site sales."""
    return any(keyword in content for keyword in SALES_KEYWORDS)
