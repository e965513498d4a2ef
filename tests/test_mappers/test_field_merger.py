from agent_scraper.mappers.field_merger import (
    SOURCE_PLATFORM,
    profile_to_record_values,
    reconcile,
    slugify,
)
from agent_scraper.schemas.profile import ExtractedProfile, SocialLinks
from agent_scraper.schemas.record import StoredRecord

SOURCE = "https://www.coldwellbankerhomes.com/tx/dallas/agent/jane-doe/aid_1/"


def _profile(**overrides) -> ExtractedProfile:
    fields = {
        "source_url": SOURCE,
        "full_name": "Jane Doe",
        "email": "jane@brokerage.com",
        "mobile_phone": "(972) 555-0134",
        "office_address": "5000 Legacy Dr, Plano, TX 75024",
        "biography": "Fresh biography text for the agent.",
        "succeeded": True,
    }
    fields.update(overrides)
    return ExtractedProfile(**fields)


def test_slugify():
    assert slugify("Jane A. Doe") == "jane-a-doe"
    assert slugify("  María O'Neil ") == "mar-a-o-neil"
    assert slugify(None) is None
    assert slugify("!!!") is None


def test_record_values_defaults():
    values = profile_to_record_values(_profile(office_address=None, mobile_phone=None, office_phone="(972) 555-0199"))

    assert values["city"] == "Unknown"
    assert values["state"] == "XX"
    assert values["primary_phone"] == "(972) 555-0199"
    assert values["source_platform"] == SOURCE_PLATFORM
    assert values["raw_profile"]["full_name"] == "Jane Doe"


def test_record_values_social_columns():
    social = SocialLinks(linkedin="https://www.linkedin.com/in/janedoe")
    values = profile_to_record_values(_profile(social_links=social))

    assert values["linkedin_url"] == "https://www.linkedin.com/in/janedoe"
    assert values["youtube_url"] is None


def test_new_record_gets_slug():
    overrides = reconcile(_profile(), None)

    assert overrides.values["website_slug"] == "jane-doe"
    assert overrides.values["city"] == "Plano"
    assert overrides.preserved == []
    fields = {c.field for c in overrides.changes}
    assert "website_slug" in fields
    assert "raw_profile" not in fields
    assert all(c.old_value is None for c in overrides.changes)


def test_existing_slug_is_stable():
    existing = StoredRecord(source_url=SOURCE, full_name="Jane Doe", website_slug="jane-doe")

    overrides = reconcile(_profile(full_name="Jane Doe-Smith"), existing)

    assert overrides.values["website_slug"] == "jane-doe"
    assert overrides.values["full_name"] == "Jane Doe-Smith"


def test_empty_slug_is_generated():
    existing = StoredRecord(source_url=SOURCE, website_slug="  ")

    overrides = reconcile(_profile(), existing)

    assert overrides.values["website_slug"] == "jane-doe"


def test_email_preserved_but_phone_overwritten():
    existing = StoredRecord(
        source_url=SOURCE,
        primary_email="jane.personal@gmail.com",
        primary_phone="(214) 555-0100",
        website_slug="jane-doe",
    )

    overrides = reconcile(_profile(), existing)

    assert overrides.values["primary_email"] == "jane.personal@gmail.com"
    assert overrides.values["primary_phone"] == "(972) 555-0134"
    assert overrides.preserved == ["primary_email"]
    phone_change = next(c for c in overrides.changes if c.field == "primary_phone")
    assert phone_change.old_value == "(214) 555-0100"
    assert all(c.field != "primary_email" for c in overrides.changes)


def test_empty_stored_email_takes_fresh_value():
    existing = StoredRecord(source_url=SOURCE, primary_email="")

    overrides = reconcile(_profile(), existing)

    assert overrides.values["primary_email"] == "jane@brokerage.com"
    assert overrides.preserved == []


def test_matching_email_is_not_reported_as_preserved():
    existing = StoredRecord(source_url=SOURCE, primary_email="jane@brokerage.com")

    overrides = reconcile(_profile(), existing)

    assert overrides.preserved == []


def test_last_extraction_wins_for_other_fields():
    existing = StoredRecord(
        source_url=SOURCE,
        bio="Old biography.",
        headshot_url="https://cdn.x.com/old.jpg",
        website_slug="jane-doe",
    )

    overrides = reconcile(_profile(headshot_url=None), existing)

    assert overrides.values["bio"] == "Fresh biography text for the agent."
    assert overrides.values["headshot_url"] is None
    changed = {c.field for c in overrides.changes}
    assert {"bio", "headshot_url"} <= changed
    assert "website_slug" not in changed
