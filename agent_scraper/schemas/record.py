from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from agent_scraper.schemas.profile import ExtractedProfile

# Columns the extraction pipeline owns and may overwrite on re-import.
PIPELINE_COLUMNS = (
    "full_name",
    "brokerage",
    "city",
    "state",
    "source_platform",
    "source_url",
    "primary_email",
    "primary_phone",
    "headshot_url",
    "logo_url",
    "brokerage_logo_url",
    "bio",
    "office_name",
    "office_address",
    "license_number",
    "linkedin_url",
    "facebook_url",
    "instagram_url",
    "twitter_url",
    "youtube_url",
    "raw_profile",
)


class StoredRecord(BaseModel):
    """A row of the scraped_agents table."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    source_url: str

    full_name: str | None = None
    brokerage: str | None = None
    city: str | None = None
    state: str | None = None
    source_platform: str | None = None
    primary_email: str | None = None
    primary_phone: str | None = None
    headshot_url: str | None = None
    logo_url: str | None = None
    brokerage_logo_url: str | None = None
    bio: str | None = None
    office_name: str | None = None
    office_address: str | None = None
    license_number: str | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    raw_profile: dict[str, Any] | None = None
    updated_at: str | None = None

    # Operator-owned; never written by the pipeline (slug excepted on insert)
    website_slug: str | None = None
    website_published: bool | None = None
    password_hash: str | None = None
    custom_domain: str | None = None
    website_config: dict[str, Any] | None = None


class FieldChange(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None


class FieldOverrides(BaseModel):
    values: dict[str, Any]
    changes: list[FieldChange] = []
    preserved: list[str] = []


class ExtractionResult(BaseModel):
    profile: ExtractedProfile
    warnings: list[str] = []
    overrides: FieldOverrides | None = None
    saved_id: str | None = None


class ParsedAddress(BaseModel):
    city: str | None = None
    state: str | None = None
    zip: str | None = None
