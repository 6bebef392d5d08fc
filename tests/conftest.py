"""
Shared pytest fixtures for the CineMatch test suite.

Provides:
  - ``FakeResponse`` / ``FakeSession``: stand-ins for ``requests`` so the
    TMDB client can be exercised without network access.
  - ``FakeTMDB``: a duck-typed TMDB client for recommender, handler and
    route tests.
  - ``sleeps``: a fake clock recording every backoff delay.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from cinematch.config import Settings
from cinematch.models import Candidate, SourceItem
from cinematch.services.retry import RetryPolicy
from cinematch.services.tmdb import BASE_URL, TMDBClient


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP error! status: {self.status_code}", response=self)

    def json(self) -> Any:
        return self.payload


class FakeSession:
    """Serve canned responses keyed by TMDB path.

    A route value may be a single response/exception, or a list consumed
    in order (the last entry repeats).
    """

    def __init__(self, routes: Dict[str, Any]) -> None:
        self.routes = routes
        self.calls: List[tuple] = []

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Any = None) -> FakeResponse:
        self.calls.append((url, dict(params or {}), timeout))
        path = url[len(BASE_URL):]
        if path not in self.routes:
            raise requests.ConnectionError(f"no route for {path}")
        entry = self.routes[path]
        if isinstance(entry, list):
            entry = entry.pop(0) if len(entry) > 1 else entry[0]
        if isinstance(entry, Exception):
            raise entry
        return entry


class FakeTMDB:
    def __init__(
        self,
        tmdb_id: Optional[int] = 603,
        source: Optional[SourceItem] = None,
        similar: Any = (),
        recommended: Any = (),
    ) -> None:
        self.tmdb_id = tmdb_id
        self.source = source or SourceItem(id=603, popularity=100.0)
        self.similar = similar
        self.recommended = recommended
        self.lookups: List[tuple] = []

    def find_by_imdb_id(self, imdb_id: str, kind: str) -> Optional[int]:
        self.lookups.append((imdb_id, kind))
        if isinstance(self.tmdb_id, Exception):
            raise self.tmdb_id
        return self.tmdb_id

    def get_details(self, kind: str, tmdb_id: int) -> SourceItem:
        if isinstance(self.source, Exception):
            raise self.source
        return self.source

    def get_similar(self, kind: str, tmdb_id: int) -> List[Candidate]:
        if isinstance(self.similar, Exception):
            raise self.similar
        return list(self.similar)

    def get_recommendations(self, kind: str, tmdb_id: int) -> List[Candidate]:
        if isinstance(self.recommended, Exception):
            raise self.recommended
        return list(self.recommended)


def cand(id: int, **fields: Any) -> Candidate:
    """Build a candidate with enough votes to pass the default filter."""
    fields.setdefault("vote_count", 100)
    return Candidate(id=id, **fields)


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def retry(sleeps: List[float]) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, base_delay=1.0, multiplier=2.0, sleep=sleeps.append)


@pytest.fixture
def make_client(retry: RetryPolicy):
    def _make(routes: Dict[str, Any]) -> TMDBClient:
        return TMDBClient(api_key="test-key", session=FakeSession(routes), retry=retry, timeout=5)

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(tmdb_api_key="test-key", minimum_vote_count=50, max_recommendations=30)
