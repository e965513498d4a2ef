"""Ordered strategy chains.

A strategy is a plain function that looks at the scraped document and
yields candidate values, most trusted first. A chain tries its strategies
in order and the first candidate that passes the field's rule wins; later
strategies are never consulted. Candidates that fail the rule are kept as
rejections so every field can explain what it skipped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import cached_property

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class Document:
    markdown: str
    markup: str | None = None

    @cached_property
    def soup(self) -> BeautifulSoup | None:
        if not self.markup:
            return None
        return BeautifulSoup(self.markup, "html.parser")


Strategy = Callable[[Document], Iterable[str]]
Rule = Callable[[str], str | None]


@dataclass
class ChainResult:
    value: str | None = None
    strategy: str | None = None
    rejections: list[str] = field(default_factory=list)


_PREVIEW = 80


def _preview(value: str) -> str:
    return value if len(value) <= _PREVIEW else value[:_PREVIEW] + "..."


def accept_all(_value: str) -> str | None:
    return None


def run_chain(
    name: str,
    doc: Document,
    strategies: Sequence[Strategy],
    rule: Rule = accept_all,
) -> ChainResult:
    result = ChainResult()
    for strategy in strategies:
        for candidate in strategy(doc):
            reason = rule(candidate)
            if reason is None:
                result.value = candidate
                result.strategy = strategy.__name__
                return result
            result.rejections.append(f"{name}: rejected {_preview(candidate)!r} ({reason})")
    return result
