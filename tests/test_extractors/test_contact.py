from agent_scraper.extractors.chain import Document
from agent_scraper.extractors.contact import (
    assign_phone_roles,
    clean_heading,
    extract_emails,
    extract_name,
    extract_phones,
    format_phone,
    name_rule,
)


def _name(markdown: str) -> str | None:
    return extract_name(Document(markdown)).value


# --- Name ---


def test_name_from_h1():
    assert _name("# Jane A. Doe\n\nSome text") == "Jane A. Doe"


def test_name_strips_site_suffix():
    assert _name("# Jane Doe | Coldwell Banker Homes") == "Jane Doe"


def test_name_strips_brokerage_suffix():
    assert _name("# Jane Doe - Coldwell Banker Realty") == "Jane Doe"


def test_name_strips_role_after_comma_or_dash():
    assert _name("# Jane Doe, Realtor") == "Jane Doe"
    assert _name("# Jane Doe - Broker Associate") == "Jane Doe"


def test_name_keeps_apostrophes_and_hyphens():
    assert _name("# Mary-Kate O'Neil") == "Mary-Kate O'Neil"


def test_name_skips_slogan_heading_and_uses_next_h1():
    markdown = "# Find Your Dream Home Today With Us Now\n\n# Jane Doe\n"
    assert _name(markdown) == "Jane Doe"


def test_name_rejects_single_word_and_records_it():
    result = extract_name(Document("# Welcome\n"))
    assert result.value is None
    assert any("Welcome" in r for r in result.rejections)


def test_name_rejects_template_artifacts():
    assert _name("# {{agent.name}} Profile") is None


def test_name_ignores_h2():
    assert _name("## Contact Me\n") is None


def test_name_falls_back_to_meet_sentence():
    assert _name("Welcome!\n\nMeet Jane Doe, your local expert.") == "Jane Doe"


def test_name_falls_back_to_specializes_sentence():
    assert _name("John Smith specializes in luxury homes.") == "John Smith"


def test_name_rule():
    assert name_rule("Jane Doe") is None
    assert name_rule("Jane") is not None
    assert name_rule("a b c d e f") is not None
    assert name_rule("Jane D0e") is not None


def test_clean_heading_leaves_plain_name():
    assert clean_heading("Jane Doe") == "Jane Doe"


# --- Email ---


def test_emails_deduped_case_insensitively_in_order():
    emails, _ = extract_emails("Jane@Brokerage.com, jane@brokerage.com, b@x.com")
    assert emails == ["jane@brokerage.com", "b@x.com"]


def test_emails_filter_generic_addresses():
    text = "noreply@cb.com info@cb.com support@cb.com jane@example.com jane@brokerage.com"
    emails, rejections = extract_emails(text)
    assert emails == ["jane@brokerage.com"]
    assert len(rejections) == 4


def test_no_emails():
    assert extract_emails("nothing here") == ([], [])


# --- Phones ---


def test_phones_formatted_and_deduped():
    phones, _ = extract_phones("Call 972.555.0134 or (972) 555-0134 or +1 214-555-0100")
    assert phones == ["(972) 555-0134", "(214) 555-0100"]


def test_phone_discovery_order_preserved():
    phones, _ = extract_phones("Office (972) 555-0199, mobile (214) 555-0134")
    assert phones == ["(972) 555-0199", "(214) 555-0134"]


def test_placeholder_phones_rejected():
    phones, rejections = extract_phones("(200) 000-0000 and 555-555-5555")
    assert phones == []
    assert len(rejections) == 2


def test_phone_not_cut_from_longer_digit_run():
    phones, _ = extract_phones("MLS 123972555013456")
    assert phones == []


def test_format_phone_round_trip():
    for digits in ("9725550134", "2145550100", "8005551234"):
        assert "".join(c for c in format_phone(digits) if c.isdigit()) == digits


def test_format_phone_drops_leading_one():
    assert format_phone("19725550134") == format_phone("9725550134") == "(972) 555-0134"


def test_format_phone_rejects_other_lengths():
    assert format_phone("555013") is None
    assert format_phone("29725550134") is None


def test_assign_phone_roles_is_positional():
    assert assign_phone_roles(["(972) 555-0134", "(972) 555-0199", "(214) 555-0100"]) == (
        "(972) 555-0134",
        "(972) 555-0199",
    )
    assert assign_phone_roles(["(972) 555-0134"]) == ("(972) 555-0134", None)
    assert assign_phone_roles([]) == (None, None)
