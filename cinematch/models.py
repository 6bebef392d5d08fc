"""Data models shared by the TMDB client, the ranker and the API layer."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

BINGE_GROUP = "cinematch-recommendations"


class Candidate(BaseModel):
    """A single TMDB movie or TV result.

    Movies carry ``title``/``release_date``; series carry
    ``name``/``first_air_date``. Everything but ``id`` is optional because
    TMDB omits fields freely.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    popularity: Optional[float] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    backdrop_path: Optional[str] = None
    poster_path: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or self.name or ""

    @property
    def year(self) -> Optional[str]:
        for value in (self.release_date, self.first_air_date):
            if value:
                year = value.split("-")[0]
                if year:
                    return year
        return None


# Details payloads have the same shape; only popularity is read.
SourceItem = Candidate


class RankedCandidate(Candidate):
    relevance_score: float = 0.0


def parse_candidates(results: Iterable[Any]) -> List[Candidate]:
    """Validate raw TMDB result dicts, skipping entries that do not parse."""
    candidates: List[Candidate] = []
    for raw in results or []:
        if not isinstance(raw, dict) or raw.get("id") is None:
            continue
        try:
            candidates.append(Candidate.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed TMDB result id=%s: %s", raw.get("id"), exc.errors()[0]["msg"])
    return candidates


class BehaviorHints(BaseModel):
    bingeGroup: str = BINGE_GROUP


class Stream(BaseModel):
    name: str
    title: str
    url: str
    thumbnail: Optional[str] = None
    behaviorHints: BehaviorHints = Field(default_factory=BehaviorHints)


class StreamResponse(BaseModel):
    streams: List[Stream] = Field(default_factory=list)


class Manifest(BaseModel):
    id: str
    version: str
    name: str
    description: str
    types: List[str]
    resources: List[str]
    idPrefixes: List[str]
    catalogs: List[Dict[str, Any]] = Field(default_factory=list)
    logo: Optional[str] = None
    background: Optional[str] = None
    contactEmail: Optional[str] = None
