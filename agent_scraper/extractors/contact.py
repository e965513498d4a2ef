import re
from collections.abc import Iterator

from agent_scraper.extractors.chain import ChainResult, Document, run_chain

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")

# North American numbers, optional +1 country code
_PHONE_RE = re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?[2-9]\d{2}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")

_BLOCKED_EMAIL_PARTS = ("noreply", "info@", "support@", "example.com")

_H1_RE = re.compile(r"^#\s+(.*)$")
_NAME_SUFFIXES = (
    re.compile(r"\s*\|.*$"),
    re.compile(r"\s*[-–]\s*Coldwell Banker.*$", re.IGNORECASE),
    re.compile(r"\s*[,\-–]\s*(?:Realtor|Agent|Broker)\b.*$", re.IGNORECASE),
)
_NAME_WORD_RE = re.compile(r"^[A-Za-z.'\-]+$")

_PERSON = r"([A-Z][a-z]+(?:\s+[A-Z]\.?)?\s+[A-Z][a-z]+)"
_NARRATIVE_NAME_PATTERNS = (
    re.compile(r"(?i:Agent|Realtor|Meet)\s+" + _PERSON),
    re.compile(_PERSON + r"\s+(?i:is a|specializes|serves)"),
)


def _digits_only(phone: str) -> str:
    return "".join(c for c in phone if c.isdigit())


# --- Name ---


def clean_heading(text: str) -> str:
    """Drop site-name and role suffixes from a heading."""
    for pattern in _NAME_SUFFIXES:
        text = pattern.sub("", text)
    return text.strip()


def name_rule(value: str) -> str | None:
    words = value.split()
    if not 2 <= len(words) <= 5:
        return f"{len(words)} words"
    if not all(_NAME_WORD_RE.match(w) for w in words):
        return "not name-like"
    return None


def h1_heading(doc: Document) -> Iterator[str]:
    for line in doc.markdown.splitlines():
        m = _H1_RE.match(line.strip())
        if m:
            yield clean_heading(m.group(1))


def narrative_sentence(doc: Document) -> Iterator[str]:
    for pattern in _NARRATIVE_NAME_PATTERNS:
        m = pattern.search(doc.markdown)
        if m:
            yield m.group(1).strip()


def extract_name(doc: Document) -> ChainResult:
    return run_chain("name", doc, (h1_heading, narrative_sentence), name_rule)


# --- Email ---


def extract_emails(markdown: str) -> tuple[list[str], list[str]]:
    """Return (emails, rejections). Order of discovery, case-insensitive dedup."""
    seen: set[str] = set()
    emails: list[str] = []
    rejections: list[str] = []
    for match in _EMAIL_RE.findall(markdown):
        email = match.lower()
        if email in seen:
            continue
        seen.add(email)
        blocked = next((part for part in _BLOCKED_EMAIL_PARTS if part in email), None)
        if blocked:
            rejections.append(f"email: rejected {email!r} (contains {blocked!r})")
            continue
        emails.append(email)
    return emails, rejections


# --- Phones ---


def format_phone(digits: str) -> str | None:
    """Format 10 digits (or 11 with a leading 1) as (XXX) XXX-XXXX."""
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10 or not digits.isdigit():
        return None
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def _is_placeholder(digits: str) -> bool:
    return digits == "2000000000" or digits.startswith("000") or len(set(digits)) == 1


def extract_phones(markdown: str) -> tuple[list[str], list[str]]:
    """Return (phones, rejections), formatted and deduplicated in discovery order."""
    phones: list[str] = []
    rejections: list[str] = []
    for match in _PHONE_RE.findall(markdown):
        digits = _digits_only(match)
        if len(digits) == 11 and digits.startswith("1"):
            digits = digits[1:]
        if _is_placeholder(digits):
            rejections.append(f"phone: rejected {match!r} (placeholder number)")
            continue
        formatted = format_phone(digits)
        if formatted is None:
            rejections.append(f"phone: rejected {match!r} ({len(digits)} digits)")
            continue
        if formatted not in phones:
            phones.append(formatted)
    return phones, rejections


def assign_phone_roles(phones: list[str]) -> tuple[str | None, str | None]:
    """Pick (mobile, office) from discovered phones.

    Purely positional: the first number on the page is taken as the mobile
    and the second as the office line. Nothing here reads the labels next
    to the numbers, so a page listing its office line first gets the roles
    swapped.
    """
    mobile = phones[0] if phones else None
    office = phones[1] if len(phones) > 1 else None
    return mobile, office
