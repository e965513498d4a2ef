from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FetchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    succeeded: bool
    markdown: str | None = None
    markup: str | None = None
    failure_reason: str | None = None
    attempts: int = 0

    @classmethod
    def success(cls, markdown: str, markup: str | None, attempts: int) -> FetchResult:
        return cls(succeeded=True, markdown=markdown, markup=markup, attempts=attempts)

    @classmethod
    def failure(cls, reason: str, attempts: int) -> FetchResult:
        return cls(succeeded=False, failure_reason=reason, attempts=attempts)


class CrawledPage(BaseModel):
    url: str
    markdown: str | None = None
    markup: str | None = None


class CrawlResult(BaseModel):
    succeeded: bool
    job_id: str | None = None
    pages: list[CrawledPage] = []
    failure_reason: str | None = None
