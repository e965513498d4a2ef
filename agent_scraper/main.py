"""Command-line entry point: import one agent profile page."""

import asyncio
import logging
import sys
from argparse import ArgumentParser

import httpx

from agent_scraper.config import Settings
from agent_scraper.schemas.record import ExtractionResult
from agent_scraper.services.firecrawl import FirecrawlService, RetryPolicy
from agent_scraper.services.profile_import import ProfileImportService
from agent_scraper.services.supabase_store import SupabaseStore


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Extract an agent profile page and save it")
    parser.add_argument("url", help="Profile page URL (the record's source identity)")
    parser.add_argument(
        "--no-save", action="store_true", help="Print the extraction without saving it",
    )
    return parser


async def run(url: str, settings: Settings, save: bool = True) -> ExtractionResult:
    policy = RetryPolicy(
        max_attempts=settings.fetch_max_attempts,
        base_delay=settings.fetch_base_delay,
        request_timeout=settings.fetch_request_timeout,
    )
    async with httpx.AsyncClient(timeout=30.0) as client:
        firecrawl = FirecrawlService(
            client,
            settings.firecrawl_api_key,
            policy=policy,
            base_url=settings.firecrawl_base_url,
            wait_ms=settings.scrape_wait_ms,
            scrape_timeout_ms=settings.scrape_timeout_ms,
        )

        store: SupabaseStore | None = None
        if settings.supabase_url and settings.supabase_service_key:
            store = SupabaseStore(client, settings.supabase_url, settings.supabase_service_key)
        else:
            logging.getLogger(__name__).warning(
                "SUPABASE_URL or SUPABASE_SERVICE_KEY missing, saving disabled"
            )

        service = ProfileImportService(firecrawl, store=store)
        return await service.run(url, save=save)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    result = asyncio.run(run(args.url, settings, save=not args.no_save))
    print(result.model_dump_json(indent=2))
    return 0 if result.profile.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
