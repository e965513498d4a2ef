import json
import logging
import re
from collections.abc import Iterator

from agent_scraper.extractors.chain import ChainResult, Document, run_chain
from agent_scraper.schemas.profile import BioSource

logger = logging.getLogger(__name__)

MIN_BIO_LENGTH = 50
_MAX_MARKDOWN_BIO = 500

_PERSON_TYPES = ("Person", "RealEstateAgent", "ProfilePage")
_NESTED_KEYS = ("about", "mainEntity")
_META_KEYS = (
    ("property", "og:description"),
    ("name", "description"),
    ("name", "twitter:description"),
)

_MD_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
_MD_LINK_RE = re.compile(r"\[[^\]]*\]\([^)]+\)")
_MD_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_MD_ITALIC_RE = re.compile(r"\*([^*]+)\*")

_BIO_SECTION_PATTERNS = (
    re.compile(r"(?:About\s+(?:Me|[A-Z][a-z]+)|Biography|Bio)[:\s]*\n+([^#\n][^\n]{50,})", re.IGNORECASE),
    re.compile(r"(?:^|\n)([A-Z][a-z]+ (?:is|has been|specializes|brings|serves)[^.]+\.[^.]+\.)", re.MULTILINE),
)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")


def bio_rule(text: str) -> str | None:
    if len(text) < MIN_BIO_LENGTH:
        return f"only {len(text)} chars"
    return None


# --- Source 1: JSON-LD ---


def _entity_description(entity: dict) -> str | None:
    if entity.get("@type") not in _PERSON_TYPES:
        return None
    if isinstance(entity.get("description"), str):
        return entity["description"]
    for key in _NESTED_KEYS:
        nested = entity.get(key)
        if isinstance(nested, dict) and isinstance(nested.get("description"), str):
            return nested["description"]
    return None


def structured_data(doc: Document) -> Iterator[str]:
    if doc.soup is None:
        return
    for script in doc.soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.get_text())
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block")
            continue
        entities = data if isinstance(data, list) else [data]
        for entity in entities:
            if not isinstance(entity, dict):
                continue
            description = _entity_description(entity)
            if description:
                yield description.strip()


# --- Source 2: rendered markup ---


def rendered_markup(doc: Document) -> Iterator[str]:
    """Clipped bio containers hold the full text even when the page truncates it."""
    soup = doc.soup
    if soup is None:
        return
    clipped = soup.select('[class*="clipText"]')
    if clipped:
        yield " ".join(el.get_text(" ", strip=True) for el in clipped).strip()
        return

    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5"]):
        if "About" not in heading.get_text():
            continue
        sibling = heading.find_next_sibling()
        if sibling is not None and sibling.name in ("p", "div"):
            yield sibling.get_text(" ", strip=True)
            return


# --- Source 3: meta tags ---


def meta_tag(doc: Document) -> Iterator[str]:
    if doc.soup is None:
        return
    for attr, key in _META_KEYS:
        tag = doc.soup.find("meta", attrs={attr: key})
        if tag is not None and tag.get("content"):
            yield tag["content"].strip()


# --- Source 4: markdown ---


def strip_markdown(markdown: str) -> str:
    text = _MD_IMAGE_RE.sub("", markdown)
    text = _MD_LINK_RE.sub("", text)
    text = _MD_BOLD_RE.sub(r"\1", text)
    return _MD_ITALIC_RE.sub(r"\1", text)


def _is_prose(paragraph: str) -> bool:
    return (
        len(paragraph) > 100
        and not paragraph.startswith("#")
        and not paragraph.startswith("|")
        and "http" not in paragraph
        and not paragraph[0].isdigit()
        and any(c.islower() for c in paragraph)
    )


def markdown_text(doc: Document) -> Iterator[str]:
    text = strip_markdown(doc.markdown)

    for pattern in _BIO_SECTION_PATTERNS:
        m = pattern.search(text)
        if m:
            bio = m.group(1).strip()
            if "http" not in bio:
                yield bio[:_MAX_MARKDOWN_BIO]

    for paragraph in _PARAGRAPH_SPLIT_RE.split(text):
        paragraph = paragraph.strip()
        if _is_prose(paragraph):
            yield paragraph[:_MAX_MARKDOWN_BIO]
            return


_SOURCES = {
    structured_data.__name__: BioSource.structured_data,
    rendered_markup.__name__: BioSource.rendered_markup,
    meta_tag.__name__: BioSource.meta_tag,
    markdown_text.__name__: BioSource.markdown,
}


def extract_biography(doc: Document) -> tuple[ChainResult, BioSource]:
    result = run_chain(
        "biography", doc, (structured_data, rendered_markup, meta_tag, markdown_text), bio_rule,
    )
    source = _SOURCES[result.strategy] if result.strategy else BioSource.none
    return result, source
