import logging

from agent_scraper.extractors.biography import extract_biography
from agent_scraper.extractors.chain import Document
from agent_scraper.extractors.contact import (
    assign_phone_roles,
    extract_emails,
    extract_name,
    extract_phones,
)
from agent_scraper.extractors.media import extract_headshot, extract_personal_logo
from agent_scraper.extractors.office import (
    extract_license,
    extract_office_address,
    extract_office_name,
)
from agent_scraper.extractors.social import extract_social_links
from agent_scraper.schemas.profile import BROKERAGE_LOGO_FALLBACK, ExtractedProfile

logger = logging.getLogger(__name__)


def extract_profile(
    source_url: str, markdown: str, markup: str | None = None,
) -> ExtractedProfile:
    """Build a profile from one scraped page.

    Deterministic for a given (markdown, markup) pair. Missing fields are
    left empty with a warning; nothing here raises for a bad page.
    """
    doc = Document(markdown=markdown, markup=markup)
    warnings: list[str] = []
    rejections: list[str] = []

    name = extract_name(doc)
    rejections += name.rejections
    if not name.value:
        warnings.append("Could not extract name")

    emails, rejected = extract_emails(markdown)
    rejections += rejected
    if not emails:
        warnings.append("No email found")

    phones, rejected = extract_phones(markdown)
    rejections += rejected
    if not phones:
        warnings.append("No phone found")
    mobile, office = assign_phone_roles(phones)

    headshot = extract_headshot(doc)
    rejections += headshot.rejections
    if not headshot.value:
        warnings.append("No headshot found")

    logo = extract_personal_logo(doc)
    rejections += logo.rejections
    if not logo.value:
        warnings.append("No team logo found")

    bio, bio_source = extract_biography(doc)
    rejections += bio.rejections
    if not bio.value:
        warnings.append("No biography found")

    office_name = extract_office_name(doc)
    rejections += office_name.rejections
    if not office_name.value:
        warnings.append("No office name found")

    office_address = extract_office_address(doc)
    rejections += office_address.rejections
    if not office_address.value:
        warnings.append("No office address found")

    license_number = extract_license(doc)
    rejections += license_number.rejections
    if not license_number.value:
        warnings.append("No license number found")

    social, rejected = extract_social_links(markdown)
    rejections += rejected
    if not any(social.model_dump().values()):
        warnings.append("No social links found")

    profile = ExtractedProfile(
        source_url=source_url,
        full_name=name.value,
        email=emails[0] if emails else None,
        all_emails=emails,
        mobile_phone=mobile,
        office_phone=office,
        all_phones=phones,
        headshot_url=headshot.value,
        personal_logo_url=logo.value,
        brokerage_logo_url=BROKERAGE_LOGO_FALLBACK,
        biography=bio.value,
        biography_source=bio_source,
        office_name=office_name.value,
        office_address=office_address.value,
        license_number=license_number.value,
        social_links=social,
        succeeded=bool(name.value) and bool(emails or phones),
        warnings=warnings,
        rejections=rejections,
    )

    logger.info(
        "Extracted %s: name=%s email=%s phones=%d headshot=%s logo=%s bio=%s (%s) success=%s",
        source_url,
        profile.full_name or "(not found)",
        profile.email or "(not found)",
        len(profile.all_phones),
        "found" if profile.headshot_url else "missing",
        "found" if profile.personal_logo_url else "missing",
        f"{len(profile.biography)} chars" if profile.biography else "missing",
        profile.biography_source,
        profile.succeeded,
    )
    return profile
