from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

BROKERAGE_LOGO_FALLBACK = "/assets/cb-realty-logo.jpg"


class BioSource(StrEnum):
    structured_data = "structured_data"
    rendered_markup = "rendered_markup"
    meta_tag = "meta_tag"
    markdown = "markdown"
    none = "none"


class SocialLinks(BaseModel):
    model_config = ConfigDict(frozen=True)

    linkedin: str | None = None
    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    youtube: str | None = None


class ExtractedProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_url: str

    full_name: str | None = None
    email: str | None = None
    all_emails: list[str] = []
    mobile_phone: str | None = None
    office_phone: str | None = None
    all_phones: list[str] = []  # discovery order, (XXX) XXX-XXXX

    headshot_url: str | None = None
    personal_logo_url: str | None = None  # team/personal mark, None is fine
    brokerage_logo_url: str = BROKERAGE_LOGO_FALLBACK

    biography: str | None = None
    biography_source: BioSource = BioSource.none

    office_name: str | None = None
    office_address: str | None = None
    license_number: str | None = None

    social_links: SocialLinks = SocialLinks()

    succeeded: bool = False
    warnings: list[str] = []
    rejections: list[str] = []  # "<field>: <reason>"

    @classmethod
    def failed(cls, source_url: str, reason: str) -> ExtractedProfile:
        """Shell returned when the page could not be fetched at all."""
        return cls(
            source_url=source_url,
            warnings=[f"Failed to scrape page: {reason}"],
        )
