import re
from collections.abc import Iterator
from urllib.parse import urlparse

from agent_scraper.extractors.chain import ChainResult, Document, run_chain

_C = r"[^\s\"'()<>\[\]]"  # URL body characters inside markdown
_IMG = r"\.(?:jpg|jpeg|png|webp)"

_HEADSHOT_TERMS_RE = re.compile(rf"https?://{_C}+(?:agent|profile|photo|headshot|portrait){_C}*{_IMG}", re.IGNORECASE)
_HEADSHOT_AGENT_PATH_RE = re.compile(rf"https?://{_C}+/agents?/{_C}+{_IMG}", re.IGNORECASE)
_HEADSHOT_CDN_RE = re.compile(rf"https?://{_C}+cloudinary{_C}+{_IMG}", re.IGNORECASE)
_ANY_IMAGE_RE = re.compile(rf"https?://{_C}+{_IMG}", re.IGNORECASE)
_IMAGE_EXT_RE = re.compile(_IMG, re.IGNORECASE)
_LOGO_EXT_RE = re.compile(r"\.(?:jpg|jpeg|png|svg|webp)", re.IGNORECASE)

_NOT_A_HEADSHOT = ("icon", "logo", "favicon", "1x1", "placeholder", "sprite", "brand", "company")

# Matched against the URL path only; the host is often a *homes.com domain
_OFFICE_PHOTO_TERMS = (
    "office", "building", "exterior", "storefront", "location",
    "branch", "property", "listing", "home", "house",
)

_HEADSHOT_SELECTORS = (
    "img.agent-photo",
    "img.agent-headshot",
    "img.profile-photo",
    'img[alt*="Agent Photo" i]',
    "div.agent-photo img",
    "div.agent-headshot img",
    ".AgentProfile_agentPhoto img",
    '[data-testid="agent-photo"]',
    'img[alt*="headshot" i]',
    'img[class*="agent" i][src*="photo"]',
)
_CONTENT_IMAGES = 'main img, [role="main"] img, .content img, article img'
_NON_PORTRAIT_ALT_RE = re.compile(r"logo|icon|brand", re.IGNORECASE)
_PORTRAIT_ALT_RE = re.compile(r"photo|headshot|agent|portrait", re.IGNORECASE)

_TEAM_HEADING_RE = re.compile(
    r"^#{1,6}[^\n]*\b(?:My\s+Team|Team|Partner|Group)\b[^\n]*$",
    re.IGNORECASE | re.MULTILINE,
)
_IMAGE_LINK_RE = re.compile(r"!\[[^\]]*\]\((https?://[^)\s]+)")
_TEAM_WINDOW = 500

_TEAM_HEADER_ELEMENTS = 'h1, h2, h3, h4, h5, h6, [class*="heading"], [class*="title"]'
_LOGO_SELECTORS = (
    "img.team-logo",
    "img.office-logo",
    "img.partner-logo",
    ".AgentProfile_teamLogo img",
    '[data-testid="team-logo"]',
    'img[alt*="logo" i]',
    'img[src*="logo" i]',
)
_HEADSHOT_ALT_RE = re.compile(r"headshot|portrait", re.IGNORECASE)
_PERSON_ALT_RE = re.compile(r"headshot|photo|agent|portrait", re.IGNORECASE)

_LOGOS_PATH_RE = re.compile(rf"https?://{_C}+/logos/{_C}+", re.IGNORECASE)
_VENDOR_CDN_RE = re.compile(rf"https?://images\.cloud\.realogyprod\.com/{_C}+", re.IGNORECASE)
_ANY_URL_RE = re.compile(rf"https?://{_C}+", re.IGNORECASE)
_COMPANY_SEGMENTS = ("coldwell", "realogy", "cb-")

# Default brokerage marks that must never be reported as a team logo
_GENERIC_LOGO_PATTERNS = (
    re.compile(r"coldwell.*banker.*logo"),
    re.compile(r"logo.*coldwell.*banker"),
    re.compile(r"cb.*logo"),
    re.compile(r"logo.*blue"),
)
_GENERIC_LOGO_FILES = (
    "cbrealty_logo",
    "coldwellbanker_logo",
    "coldwell-banker-logo",
    "global-luxury-logo",
)




def _src(img) -> str | None:
    return img.get("src") or img.get("data-src")


def is_office_photo(url: str) -> bool:
    path = urlparse(url).path.lower()
    return any(term in path for term in _OFFICE_PHOTO_TERMS)


# --- Headshot ---


def headshot_rule(url: str) -> str | None:
    if not _IMAGE_EXT_RE.search(url):
        return "not an image"
    lower = url.lower()
    for term in _NOT_A_HEADSHOT:
        if term in lower:
            return f"contains {term!r}"
    if is_office_photo(url):
        return "office or listing photo"
    return None


def dom_headshot(doc: Document) -> Iterator[str]:
    """Known portrait selectors first, then content images with person-like alt text."""
    soup = doc.soup
    if soup is None:
        return
    for selector in _HEADSHOT_SELECTORS:
        img = soup.select_one(selector)
        if img is None:
            continue
        src = _src(img)
        if src and not _NON_PORTRAIT_ALT_RE.search(img.get("alt") or ""):
            yield src
    for img in soup.select(_CONTENT_IMAGES):
        src = _src(img)
        alt = img.get("alt") or ""
        if not src or _NON_PORTRAIT_ALT_RE.search(alt):
            continue
        if _PORTRAIT_ALT_RE.search(alt) or 3 < len(alt) < 50:
            yield src


def portrait_filename(doc: Document) -> Iterator[str]:
    yield from _HEADSHOT_TERMS_RE.findall(doc.markdown)


def agent_path(doc: Document) -> Iterator[str]:
    yield from _HEADSHOT_AGENT_PATH_RE.findall(doc.markdown)


def image_cdn(doc: Document) -> Iterator[str]:
    yield from _HEADSHOT_CDN_RE.findall(doc.markdown)


def any_image(doc: Document) -> Iterator[str]:
    yield from _ANY_IMAGE_RE.findall(doc.markdown)


def extract_headshot(doc: Document) -> ChainResult:
    return run_chain(
        "headshot",
        doc,
        (dom_headshot, portrait_filename, agent_path, image_cdn, any_image),
        headshot_rule,
    )


# --- Personal / team logo ---


def is_generic_logo(url: str) -> bool:
    lower = url.lower()
    if any(p.search(lower) for p in _GENERIC_LOGO_PATTERNS):
        return True
    return any(name in lower for name in _GENERIC_LOGO_FILES)


def _usable_logo(src: str | None) -> bool:
    if not src or not _LOGO_EXT_RE.search(src):
        return False
    return not is_generic_logo(src) and not is_office_photo(src)


def team_header_image(doc: Document) -> Iterator[str]:
    """Images inside the section holding a "Team" header in the rendered markup."""
    soup = doc.soup
    if soup is None:
        return
    for header in soup.select(_TEAM_HEADER_ELEMENTS):
        text = header.get_text(" ", strip=True).lower()
        if "team" not in text or "contact" in text:
            continue
        section = header.parent or header.find_next_sibling()
        if section is None:
            continue
        for img in section.find_all("img"):
            src = _src(img)
            if _usable_logo(src) and not _HEADSHOT_ALT_RE.search(img.get("alt") or ""):
                yield src


def logo_selector_image(doc: Document) -> Iterator[str]:
    soup = doc.soup
    if soup is None:
        return
    for selector in _LOGO_SELECTORS:
        for img in soup.select(selector):
            src = _src(img)
            if _usable_logo(src) and not _PERSON_ALT_RE.search(img.get("alt") or ""):
                yield src


def team_section_image(doc: Document) -> Iterator[str]:
    for heading in _TEAM_HEADING_RE.finditer(doc.markdown):
        m = _IMAGE_LINK_RE.search(doc.markdown, heading.end())
        if m and m.start() - heading.end() <= _TEAM_WINDOW:
            yield m.group(1)


def logos_path(doc: Document) -> Iterator[str]:
    yield from _LOGOS_PATH_RE.findall(doc.markdown)


def vendor_cdn_logo(doc: Document) -> Iterator[str]:
    for url in _VENDOR_CDN_RE.findall(doc.markdown):
        if "/logos/" in url and "/photos/" not in url and "/offices/" not in url:
            yield url


def company_logo(doc: Document) -> Iterator[str]:
    for url in _ANY_URL_RE.findall(doc.markdown):
        lower = url.lower()
        if "logos" in lower and any(seg in lower for seg in _COMPANY_SEGMENTS):
            yield url


def extract_personal_logo(doc: Document) -> ChainResult:
    """First hit from the chain, cleared again if it is the default brokerage mark.

    The markup strategies skip generic marks and office photos themselves;
    the markdown strategies stop at their first hit.
    """
    result = run_chain(
        "personal_logo",
        doc,
        (
            team_header_image,
            logo_selector_image,
            team_section_image,
            logos_path,
            vendor_cdn_logo,
            company_logo,
        ),
    )
    if result.value and is_generic_logo(result.value):
        result.rejections.append(
            f"personal_logo: rejected {result.value!r} (generic brokerage logo)"
        )
        result.value = None
    return result
