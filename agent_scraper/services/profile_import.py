import logging

import httpx
from pydantic import ValidationError

from agent_scraper.exceptions.custom import RateLimitError, StorageError
from agent_scraper.extractors.profile import extract_profile
from agent_scraper.mappers.field_merger import reconcile
from agent_scraper.schemas.profile import ExtractedProfile
from agent_scraper.schemas.record import ExtractionResult
from agent_scraper.services.firecrawl import FirecrawlService
from agent_scraper.services.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)


class ProfileImportService:
    """Fetch, extract, reconcile and save one agent profile page."""

    def __init__(
        self,
        firecrawl: FirecrawlService,
        store: SupabaseStore | None = None,
    ):
        self._firecrawl = firecrawl
        self._store = store

    async def run(self, url: str, save: bool = True) -> ExtractionResult:
        fetched = await self._firecrawl.scrape(url)
        if not fetched.succeeded:
            logger.error("Scrape failed for %s: %s", url, fetched.failure_reason)
            profile = ExtractedProfile.failed(url, fetched.failure_reason or "Unknown error")
            return ExtractionResult(profile=profile, warnings=list(profile.warnings))

        profile = extract_profile(url, fetched.markdown or "", fetched.markup)
        result = ExtractionResult(profile=profile, warnings=list(profile.warnings))

        if not save or self._store is None:
            return result
        if not profile.succeeded:
            logger.info("Not saving incomplete extraction for %s", url)
            result.warnings.append("Extraction incomplete, profile not saved")
            return result

        try:
            existing = await self._store.get_by_source_url(url)
            overrides = reconcile(profile, existing)
            result.overrides = overrides
            result.saved_id = await self._store.upsert(overrides.values)
        except (StorageError, RateLimitError, httpx.HTTPError, ValidationError) as exc:
            logger.error("Failed to save profile for %s: %s", url, exc)
            result.warnings.append(f"Failed to save profile: {exc}")
            return result

        if overrides.preserved:
            logger.info(
                "Kept stored values for %s: %s", url, ", ".join(overrides.preserved),
            )
        return result
