import asyncio
import logging
from dataclasses import dataclass

import httpx

from agent_scraper.exceptions.custom import FirecrawlError
from agent_scraper.schemas.firecrawl import CrawledPage, CrawlResult, FetchResult

logger = logging.getLogger(__name__)

BASE_URL = "https://api.firecrawl.dev/v1"

_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_CRAWL_TIMEOUT = 30.0


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 2.0  # seconds
    request_timeout: float = 90.0  # must exceed the provider-side scrape timeout
    poll_interval: float = 3.0
    max_polls: int = 100


def _backoff(status: int | None, attempt: int, policy: RetryPolicy) -> float | None:
    """Delay before the next attempt for a throttled or distressed upstream.

    Returns None when the failure is not one of the retryable classes.
    """
    if status == 429:
        return policy.base_delay * attempt
    if status == 408 or (status is not None and status >= 500):
        return policy.base_delay * attempt * 2
    return None


def _crawled_pages(items) -> list[CrawledPage]:
    if items is None:
        return []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise FirecrawlError("Malformed crawl payload")

    pages = []
    for item in items:
        metadata = item.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        markdown = item.get("markdown")
        markup = item.get("html")
        pages.append(
            CrawledPage(
                url=str(metadata.get("sourceURL") or item.get("url") or ""),
                markdown=markdown if isinstance(markdown, str) else None,
                markup=markup if isinstance(markup, str) else None,
            )
        )
    return pages


class FirecrawlService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        policy: RetryPolicy | None = None,
        base_url: str = BASE_URL,
        wait_ms: int = 5000,
        scrape_timeout_ms: int = 60000,
    ):
        self._client = client
        self._policy = policy or RetryPolicy()
        self._base_url = base_url.rstrip("/")
        self._wait_ms = wait_ms
        self._scrape_timeout_ms = scrape_timeout_ms
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def scrape(self, url: str) -> FetchResult:
        """Fetch rendered markdown and raw HTML for one page. Never raises."""
        policy = self._policy
        for attempt in range(1, policy.max_attempts + 1):
            logger.info("Scraping attempt %d/%d: %s", attempt, policy.max_attempts, url)
            try:
                data = await self._post_scrape(url)
            except FirecrawlError as exc:
                status = exc.status_code
                message = exc.message
            except httpx.TimeoutException as exc:
                # A client-side timeout is treated like an upstream 408
                status = 408
                message = str(exc) or "Request timed out"
            except (httpx.HTTPError, ValueError) as exc:
                status = None
                message = str(exc) or exc.__class__.__name__
            else:
                if not data.get("success"):
                    reason = str(data.get("error") or "Unknown error")
                    logger.error("Firecrawl rejected %s: %s", url, reason)
                    return FetchResult.failure(reason, attempts=attempt)
                payload = data.get("data") or {}
                if not isinstance(payload, dict):
                    logger.error("Firecrawl returned a malformed payload for %s", url)
                    return FetchResult.failure("Malformed scrape payload", attempts=attempt)
                markdown = payload.get("markdown")
                markup = payload.get("html")
                if markdown is not None and not isinstance(markdown, str):
                    logger.error("Firecrawl returned non-text markdown for %s", url)
                    return FetchResult.failure("Malformed scrape payload", attempts=attempt)
                if not markdown:
                    logger.error("Firecrawl returned no markdown for %s", url)
                    return FetchResult.failure("Scrape returned no content", attempts=attempt)
                logger.info("Scraped %d markdown chars from %s", len(markdown), url)
                return FetchResult.success(
                    markdown, markup if isinstance(markup, str) else None, attempts=attempt,
                )

            logger.warning(
                "Attempt %d failed for %s: %s - %s",
                attempt, url, status or "network error", message,
            )

            delay = _backoff(status, attempt, policy)
            if delay is not None:
                logger.info("Upstream status %s, waiting %.1fs before retry", status, delay)
                await asyncio.sleep(delay)
                continue

            if attempt == policy.max_attempts:
                logger.error("Failed to scrape %s after %d attempts", url, attempt)
                return FetchResult.failure(message, attempts=attempt)

            await asyncio.sleep(policy.base_delay)

        return FetchResult.failure("Max retries exceeded", attempts=policy.max_attempts)

    async def _post_scrape(self, url: str) -> dict:
        resp = await self._client.post(
            f"{self._base_url}/scrape",
            json={
                "url": url,
                "formats": ["markdown", "html"],
                "waitFor": self._wait_ms,
                "timeout": self._scrape_timeout_ms,
                "headers": {"User-Agent": _BROWSER_UA},
            },
            headers=self._headers,
            timeout=self._policy.request_timeout,
        )
        if resp.status_code >= 400:
            raise FirecrawlError(resp.text or resp.reason_phrase, status_code=resp.status_code)
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError("Malformed scrape payload")
        return data

    async def crawl(
        self,
        url: str,
        limit: int = 5,
        allowed_paths: tuple[str, ...] = ("/", "/about", "/contact"),
    ) -> CrawlResult:
        """Run a small crawl job (submit, poll, collect). Never raises."""
        policy = self._policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                job_id = await self._submit_crawl(url, limit, allowed_paths)
                return await self._poll_crawl(job_id)
            except FirecrawlError as exc:
                status = exc.status_code
                message = exc.message
            except httpx.TimeoutException as exc:
                status = 408
                message = str(exc) or "Request timed out"
            except (httpx.HTTPError, ValueError) as exc:
                status = None
                message = str(exc) or exc.__class__.__name__

            logger.warning("Crawl attempt %d failed for %s: %s", attempt, url, message)

            delay = _backoff(status, attempt, policy)
            if delay is not None:
                await asyncio.sleep(delay)
                continue

            if attempt == policy.max_attempts:
                logger.error("Failed to crawl %s after %d attempts", url, attempt)
                return CrawlResult(succeeded=False, failure_reason=message)

            await asyncio.sleep(policy.base_delay)

        return CrawlResult(succeeded=False, failure_reason="Max retries exceeded")

    async def _submit_crawl(
        self, url: str, limit: int, allowed_paths: tuple[str, ...],
    ) -> str:
        resp = await self._client.post(
            f"{self._base_url}/crawl",
            json={
                "url": url,
                "limit": limit,
                "scrapeOptions": {
                    "formats": ["markdown"],
                    "includeTags": ["a", "p", "div", "span", "footer", "header"],
                    "actions": [{"type": "wait", "milliseconds": 2000}],
                },
                "allowedPaths": list(allowed_paths),
            },
            headers=self._headers,
            timeout=_CRAWL_TIMEOUT,
        )
        if resp.status_code >= 400:
            raise FirecrawlError(resp.text or resp.reason_phrase, status_code=resp.status_code)

        data = resp.json()
        if not isinstance(data, dict):
            raise FirecrawlError("Malformed crawl payload")
        if not data.get("success") or not data.get("id"):
            raise FirecrawlError(str(data.get("error") or "Failed to start crawl"))
        logger.info("Started crawl job %s for %s", data["id"], url)
        return str(data["id"])

    async def _poll_crawl(self, job_id: str) -> CrawlResult:
        for _ in range(self._policy.max_polls):
            await asyncio.sleep(self._policy.poll_interval)
            resp = await self._client.get(
                f"{self._base_url}/crawl/{job_id}",
                headers=self._headers,
                timeout=_CRAWL_TIMEOUT,
            )
            if resp.status_code >= 400:
                raise FirecrawlError(resp.text or resp.reason_phrase, status_code=resp.status_code)

            data = resp.json()
            if not isinstance(data, dict):
                raise FirecrawlError("Malformed crawl payload")
            status = data.get("status") or "unknown"
            if status == "completed":
                pages = _crawled_pages(data.get("data"))
                logger.info("Crawl job %s completed with %d pages", job_id, len(pages))
                return CrawlResult(succeeded=True, job_id=job_id, pages=pages)
            if status == "failed":
                return CrawlResult(succeeded=False, job_id=job_id, failure_reason="Crawl job failed")
            if status not in ("scraping", "pending"):
                return CrawlResult(
                    succeeded=False, job_id=job_id,
                    failure_reason=f"Unexpected crawl status: {status}",
                )

        return CrawlResult(succeeded=False, job_id=job_id, failure_reason="Crawl job did not finish")
