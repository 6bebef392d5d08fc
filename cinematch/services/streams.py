"""Stream record construction.

The media browser has no "recommendation" resource, so each ranked
title is presented as a pseudo-stream: the badge shows rating and year,
the URL opens the title's TMDB page, and every record shares one binge
group so the client treats the list as a single swappable set.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from ..models import BINGE_GROUP, BehaviorHints, Candidate, RankedCandidate, Stream
from .tmdb import IMAGE_URL, WEB_URL, tmdb_media_type


def badge(candidate: Candidate) -> str:
    """Return the short "⭐ 7.8 • 1999" label shown as the stream name."""
    if candidate.vote_average is None:
        rating = "?"
    else:
        # Half-up on the exact binary value, like JavaScript toFixed.
        rating = str(Decimal(candidate.vote_average).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return f"⭐ {rating} • {candidate.year or 'N/A'}"


def title_url(kind: str, tmdb_id: int) -> str:
    return f"{WEB_URL}/{tmdb_media_type(kind)}/{tmdb_id}"


def thumbnail_url(candidate: Candidate) -> Optional[str]:
    # Backdrops fit the stream list better than posters.
    path = candidate.backdrop_path or candidate.poster_path
    if not path:
        return None
    return f"{IMAGE_URL}{path}"


def to_stream(kind: str, candidate: RankedCandidate) -> Stream:
    return Stream(
        name=badge(candidate),
        title=candidate.display_title,
        url=title_url(kind, candidate.id),
        thumbnail=thumbnail_url(candidate),
        behaviorHints=BehaviorHints(bingeGroup=BINGE_GROUP),
    )


def to_streams(kind: str, ranked: Iterable[RankedCandidate]) -> List[Stream]:
    return [to_stream(kind, candidate) for candidate in ranked]
