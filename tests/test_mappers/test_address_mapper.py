from agent_scraper.mappers.address_mapper import parse_office_address


def test_parse_full_address():
    parsed = parse_office_address("5000 Legacy Dr, Suite 100, Plano, TX 75024")

    assert parsed.city == "Plano"
    assert parsed.state == "TX"
    assert parsed.zip == "75024"


def test_parse_zip_plus_four():
    parsed = parse_office_address("123 Main St, Dallas, TX 75201-1234")

    assert parsed.city == "Dallas"
    assert parsed.state == "TX"
    assert parsed.zip == "75201"


def test_parse_state_without_zip():
    parsed = parse_office_address("123 Main St, Austin, TX")

    assert parsed.city == "Austin"
    assert parsed.state == "TX"
    assert parsed.zip is None


def test_parse_single_part():
    parsed = parse_office_address("Downtown office")

    assert parsed.city is None
    assert parsed.state is None


def test_parse_empty():
    parsed = parse_office_address(None)

    assert parsed.city is None
    assert parsed.state is None
    assert parsed.zip is None
