"""Recommendation engine for CineMatch.

Given a title already resolved to a TMDB id, the recommender pulls the
"similar" and "recommended" lists from TMDB in parallel, merges them,
drops duplicates and titles with too few votes, scores what is left
against the source title and keeps the best ``max_recommendations``.

The relevance score has two halves worth up to 50 points each:
popularity relative to the source title (capped at the source's own
popularity) and the absolute TMDB vote average.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from ..models import Candidate, RankedCandidate, SourceItem
from .tmdb import TMDBClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """Candidates from one TMDB list, or the reason the fetch failed."""

    source: str
    items: List[Candidate] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def relevance_score(candidate: Candidate, source: SourceItem) -> float:
    """Score a candidate between 0 and 100 relative to the source title.

    Returns 0 when either popularity is missing or not positive, since
    there is no baseline to normalise against.
    """
    if (source.popularity or 0) <= 0 or (candidate.popularity or 0) <= 0:
        logger.warning(
            "Missing popularity data (item=%s, source=%s)", candidate.popularity, source.popularity
        )
        return 0.0
    popularity_score = min(candidate.popularity / source.popularity, 1.0) * 50
    rating = min(max(candidate.vote_average or 0.0, 0.0), 10.0)
    rating_score = rating / 10 * 50
    return popularity_score + rating_score


def dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    seen = set()
    unique: List[Candidate] = []
    for item in candidates:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def rank_candidates(
    similar: Sequence[Candidate],
    recommended: Sequence[Candidate],
    source: SourceItem,
    minimum_vote_count: int,
    max_results: int,
) -> List[RankedCandidate]:
    """Merge, filter, score and truncate the two candidate lists.

    Similar titles come first, so when an id appears in both lists the
    similar copy is kept. The sort is stable: equal scores keep their
    merged order.
    """
    merged = dedupe([*similar, *recommended])
    eligible = [item for item in merged if (item.vote_count or 0) >= minimum_vote_count]
    ranked = [
        RankedCandidate(**item.model_dump(), relevance_score=relevance_score(item, source))
        for item in eligible
    ]
    ranked.sort(key=lambda item: item.relevance_score, reverse=True)
    return ranked[: max(0, max_results)]


class Recommender:
    def __init__(self, tmdb: TMDBClient, minimum_vote_count: int, max_results: int) -> None:
        self.tmdb = tmdb
        self.minimum_vote_count = minimum_vote_count
        self.max_results = max_results

    def _fetch(self, source: str, fn: Callable[[str, int], List[Candidate]], kind: str, tmdb_id: int) -> FetchOutcome:
        try:
            items = fn(kind, tmdb_id)
        except Exception as exc:
            logger.exception("Error in %s for TMDB id %s", source, tmdb_id)
            return FetchOutcome(source=source, error=f"{type(exc).__name__}: {exc}")
        logger.info("[%s] Found %d items for TMDB id %s", source, len(items), tmdb_id)
        return FetchOutcome(source=source, items=items)

    def fetch_candidates(self, kind: str, tmdb_id: int) -> tuple[FetchOutcome, FetchOutcome]:
        """Fetch the similar and recommended lists concurrently.

        Both fetches always run to completion; a failure in one does not
        cancel the other.
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            similar = executor.submit(self._fetch, "similar", self.tmdb.get_similar, kind, tmdb_id)
            recommended = executor.submit(self._fetch, "recommendations", self.tmdb.get_recommendations, kind, tmdb_id)
            return similar.result(), recommended.result()

    def recommend(self, kind: str, tmdb_id: int) -> List[RankedCandidate]:
        """Return ranked recommendations for an already resolved TMDB id.

        Errors fetching the source details propagate to the caller;
        errors fetching either candidate list only empty that list.
        """
        logger.info("Fetching source details for TMDB id %s", tmdb_id)
        source = self.tmdb.get_details(kind, tmdb_id)
        similar, recommended = self.fetch_candidates(kind, tmdb_id)
        return rank_candidates(
            similar.items,
            recommended.items,
            source,
            minimum_vote_count=self.minimum_vote_count,
            max_results=self.max_results,
        )
