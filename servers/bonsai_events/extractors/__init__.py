"""
Field extractors for event announcement text.

Each extractor is a pure function over free text:
- parse_date_range(content, title, clock) -> DateRange
- extract_area / extract_venue / extract_locality / extract_organizer /
  extract_admission_fee -> Optional[str]
- has_sales -> bool
"""

from .dates import parse_date_range
from .fields import (
    extract_admission_fee,
    extract_area,
    extract_locality,
    extract_organizer,
    extract_venue,
    has_sales,
)

__all__ = [
    "parse_date_range",
    "extract_area",
    "extract_venue",
    "extract_locality",
    "extract_organizer",
    "extract_admission_fee",
    "has_sales",
]
