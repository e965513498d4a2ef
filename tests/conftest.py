import pytest

PROFILE_URL = "https://www.coldwellbankerhomes.com/tx/dallas/agent/jane-doe/aid_12345/"

JANE_MARKDOWN = """\
[Skip to content](#main)

# Jane A. Doe

Coldwell Banker Realty - Dallas North

Call (972) 555-0134 or office (972) 555-0199

Email: jane.doe@brokerage.com

![headshot](https://cdn.x.com/agents/jane-doe-headshot.jpg)

## About Jane

Jane Doe is a top producing agent in North Dallas. She has helped hundreds of families buy and sell homes across the metroplex since 2009.

Office: 5000 Legacy Dr, Suite 100, Plano, TX 75024

TREC# 0654321

[LinkedIn](https://www.linkedin.com/in/janedoe-realtor)
[Facebook](https://www.facebook.com/coldwellbanker)
[Facebook](https://www.facebook.com/janedoehomes)
"""

LONG_BIO = (
    "Jane has spent fifteen years helping buyers and sellers across North Texas "
    "find the right home at the right price."
)


@pytest.fixture
def jane_markdown():
    return JANE_MARKDOWN


@pytest.fixture
def profile_url():
    return PROFILE_URL
