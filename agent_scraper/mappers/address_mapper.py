import re

from agent_scraper.schemas.record import ParsedAddress

_STATE_ZIP_RE = re.compile(r"\b([A-Z]{2})\s*(\d{5})(?:-\d{4})?\s*$")
_STATE_RE = re.compile(r"\b([A-Z]{2})\b")


def parse_office_address(address: str | None) -> ParsedAddress:
    """Split "123 Main St, City, ST 12345" into city, state and zip.

    The city is taken as the second-to-last comma-separated part.
    """
    if not address:
        return ParsedAddress()

    parts = [p.strip() for p in address.split(",")]
    city = parts[-2] if len(parts) >= 2 and parts[-2] else None

    m = _STATE_ZIP_RE.search(parts[-1])
    if m:
        return ParsedAddress(city=city, state=m.group(1), zip=m.group(2))

    m = _STATE_RE.search(address)
    return ParsedAddress(city=city, state=m.group(1) if m else None)
