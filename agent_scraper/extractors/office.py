import re
from collections.abc import Iterator

from agent_scraper.extractors.chain import ChainResult, Document, run_chain

BROKERAGE_NAME = "Coldwell Banker Realty"

_BRANCH_RE = re.compile(r"Coldwell\s+Banker\s+Realty\s*[-–]?\s*([A-Za-z ]{3,30})", re.IGNORECASE)
_BROKERAGE_RE = re.compile(r"Coldwell\s+Banker\s+Realty", re.IGNORECASE)
_NOT_A_LOCATION = frozenset({"License", "Agent", "About", "Contact"})

_MAP_LINK_RE = re.compile(r"\[([^\]]*\d{5}[^\]]*)\]\([^)]*(?:map|google|maps)[^)]*\)", re.IGNORECASE)
_LABELED_ADDRESS_RE = re.compile(
    r"(?:Office|Location|Address)[:\s\S]{0,100}?"
    r"(\d+\s+[A-Za-z0-9\s]+(?:Blvd|St|Ave|Rd|Dr|Ln|Way|Ct|Pkwy)[,.\s]+(?:Ste\.?|Suite)?\s*\d*[,.\s]+"
    r"[A-Za-z\s]+,?\s*[A-Z]{2}\s*\d{5})",
    re.IGNORECASE,
)
_STREET_ADDRESS_RE = re.compile(
    r"(\d+\s+[A-Za-z0-9\s]+(?:Boulevard|Blvd|Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Way|Court|Ct|Parkway|Pkwy)"
    r"[,.\s]+(?:Ste\.?|Suite\.?)?\s*\d*[,.\s]*[A-Za-z\s]+,\s*[A-Z]{2}\s*\d{5})",
    re.IGNORECASE,
)
_WS_RE = re.compile(r"\s+")

_LICENSE_RE = re.compile(
    r"\b(?:Lic(?:ense)?|DRE|TREC|CalDRE|BRE)[.\s#]*(?:Number|No\.?|[#:])?\s*([0-9A-Z-]{4,})",
    re.IGNORECASE,
)


# --- Office name ---


def office_name_rule(value: str) -> str | None:
    _, _, location = value.partition(" - ")
    first = location.split()[0] if location else ""
    if first.capitalize() in _NOT_A_LOCATION:
        return f"{first!r} is not a location"
    return None


def branch_name(doc: Document) -> Iterator[str]:
    for m in _BRANCH_RE.finditer(doc.markdown):
        location = m.group(1).strip()
        if location:
            yield f"{BROKERAGE_NAME} - {location}"


def brokerage_name(doc: Document) -> Iterator[str]:
    if _BROKERAGE_RE.search(doc.markdown):
        yield BROKERAGE_NAME


def extract_office_name(doc: Document) -> ChainResult:
    return run_chain("office_name", doc, (branch_name, brokerage_name), office_name_rule)


# --- Office address ---


def map_link(doc: Document) -> Iterator[str]:
    m = _MAP_LINK_RE.search(doc.markdown)
    if m:
        yield m.group(1).strip()


def labeled_address(doc: Document) -> Iterator[str]:
    m = _LABELED_ADDRESS_RE.search(doc.markdown)
    if m:
        yield _WS_RE.sub(" ", m.group(1)).strip()


def street_address(doc: Document) -> Iterator[str]:
    m = _STREET_ADDRESS_RE.search(doc.markdown)
    if m:
        yield _WS_RE.sub(" ", m.group(1)).strip()


def extract_office_address(doc: Document) -> ChainResult:
    return run_chain("office_address", doc, (map_link, labeled_address, street_address))


# --- License ---


def license_rule(value: str) -> str | None:
    if not any(c.isdigit() for c in value):
        return "no digits"
    return None


def license_label(doc: Document) -> Iterator[str]:
    for m in _LICENSE_RE.finditer(doc.markdown):
        yield m.group(1).strip("-")


def extract_license(doc: Document) -> ChainResult:
    return run_chain("license_number", doc, (license_label,), license_rule)
