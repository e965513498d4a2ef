import re

from agent_scraper.schemas.profile import SocialLinks

_SOCIAL_PATTERNS = {
    "linkedin": re.compile(r"https?://(?:www\.)?linkedin\.com/in/[a-zA-Z0-9_-]+/?", re.IGNORECASE),
    "facebook": re.compile(r"https?://(?:www\.)?facebook\.com/[a-zA-Z0-9._-]+/?", re.IGNORECASE),
    "instagram": re.compile(r"https?://(?:www\.)?instagram\.com/[a-zA-Z0-9._]+/?", re.IGNORECASE),
    "twitter": re.compile(r"https?://(?:www\.)?(?:twitter|x)\.com/[a-zA-Z0-9_]+/?", re.IGNORECASE),
    "youtube": re.compile(
        r"https?://(?:www\.)?youtube\.com/(?:channel/|user/|c/|@)?[a-zA-Z0-9_-]+", re.IGNORECASE,
    ),
}

# Brand pages of the brokerage itself
_CORPORATE_PATHS = ("/coldwellbanker", "/cbglobal", "/company/")


def is_corporate_page(url: str) -> bool:
    lower = url.lower()
    return any(path in lower for path in _CORPORATE_PATHS)


def extract_social_links(markdown: str) -> tuple[SocialLinks, list[str]]:
    """Pick one link per platform, preferring the agent's own page over the brand's."""
    found: dict[str, str | None] = {}
    rejections: list[str] = []
    for platform, pattern in _SOCIAL_PATTERNS.items():
        matches = pattern.findall(markdown)
        if not matches:
            found[platform] = None
            continue
        personal = [url for url in matches if not is_corporate_page(url)]
        if personal:
            found[platform] = personal[0]
            continue
        rejections.append(
            f"{platform}: only corporate pages found, falling back to {matches[0]!r}"
        )
        found[platform] = matches[0]
    return SocialLinks(**found), rejections
