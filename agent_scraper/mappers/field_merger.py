import re
from typing import Any

from agent_scraper.extractors.office import BROKERAGE_NAME
from agent_scraper.mappers.address_mapper import parse_office_address
from agent_scraper.schemas.profile import ExtractedProfile
from agent_scraper.schemas.record import FieldChange, FieldOverrides, StoredRecord

SOURCE_PLATFORM = "coldwellbanker"

_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Columns left out of the change list; they differ on every run
_UNTRACKED = frozenset({"raw_profile"})


def _is_empty(value: str | None) -> bool:
    return value is None or value.strip() == ""


def slugify(name: str | None) -> str | None:
    """Public URL slug for a name: Jane A. Doe -> jane-a-doe."""
    slug = _SLUG_RE.sub("-", (name or "").lower()).strip("-")
    return slug or None


def profile_to_record_values(profile: ExtractedProfile) -> dict[str, Any]:
    """Map a profile onto the pipeline-owned columns of scraped_agents."""
    parsed = parse_office_address(profile.office_address)
    social = profile.social_links
    return {
        "full_name": profile.full_name,
        "brokerage": BROKERAGE_NAME,
        "city": parsed.city or "Unknown",
        "state": parsed.state or "XX",
        "source_platform": SOURCE_PLATFORM,
        "source_url": profile.source_url,
        "primary_email": profile.email,
        "primary_phone": profile.mobile_phone or profile.office_phone,
        "headshot_url": profile.headshot_url,
        "logo_url": profile.personal_logo_url,
        "brokerage_logo_url": profile.brokerage_logo_url,
        "bio": profile.biography,
        "office_name": profile.office_name,
        "office_address": profile.office_address,
        "license_number": profile.license_number,
        "linkedin_url": social.linkedin,
        "facebook_url": social.facebook,
        "instagram_url": social.instagram,
        "twitter_url": social.twitter,
        "youtube_url": social.youtube,
        "raw_profile": profile.model_dump(mode="json"),
    }


def reconcile(
    fresh: ExtractedProfile,
    existing: StoredRecord | None,
) -> FieldOverrides:
    """Decide the column values to write for a freshly extracted profile.

    Rules, in order:
    1. an existing website slug is never replaced;
    2. a stored email that differs from the scraped one is kept;
    3. the phone is always overwritten by the scraped value;
    4. every other pipeline column is overwritten (last extraction wins).

    The email/phone asymmetry is inherited behavior pending product review:
    a human-corrected phone number is lost on the next re-import. Tests pin
    it on purpose; do not change it without sign-off.
    """
    values = profile_to_record_values(fresh)

    if existing is None:
        values["website_slug"] = slugify(fresh.full_name)
        return FieldOverrides(
            values=values,
            changes=[
                FieldChange(field=field, old_value=None, new_value=new)
                for field, new in values.items()
                if new is not None and field not in _UNTRACKED
            ],
        )

    preserved: list[str] = []

    if not _is_empty(existing.website_slug):
        values["website_slug"] = existing.website_slug
    else:
        values["website_slug"] = slugify(fresh.full_name)

    if not _is_empty(existing.primary_email) and existing.primary_email != values["primary_email"]:
        values["primary_email"] = existing.primary_email
        preserved.append("primary_email")

    changes = [
        FieldChange(field=field, old_value=getattr(existing, field), new_value=new)
        for field, new in values.items()
        if field not in _UNTRACKED and getattr(existing, field) != new
    ]
    return FieldOverrides(values=values, changes=changes, preserved=preserved)
