"""
Bonsai Event Scraper

Collects bonsai exhibition announcements from bonsai.co.jp regional listings:
- Fetching each region's listing page in turn
- Splitting pages into event blocks
- Extracting dates, prefecture, city, venue, organizer, fee and sales flag

Target: bonsai.co.jp event listings for all 10 regions of Japan
"""

__version__ = "1.0.0"
