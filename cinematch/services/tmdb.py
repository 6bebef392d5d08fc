"""TMDB API client.

This module wraps the handful of TheMovieDB (TMDB) v3 endpoints the
recommender needs: looking up a title by its IMDb id, fetching title
details, and reading the first page of the similar and recommended
lists. Every call carries the API key as a query parameter and goes
through a :class:`RetryPolicy`. See https://developer.themoviedb.org
for API documentation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..config import Settings
from ..models import Candidate, SourceItem, parse_candidates
from .retry import RetryPolicy

BASE_URL = "https://api.themoviedb.org/3"
WEB_URL = "https://www.themoviedb.org"
IMAGE_URL = "https://image.tmdb.org/t/p/w780"

# Add-on media kinds mapped to TMDB path segments.
MEDIA_TYPES = {"movie": "movie", "series": "tv"}


def tmdb_media_type(kind: str) -> str:
    """Translate an add-on media kind ("movie"/"series") to TMDB's ("movie"/"tv")."""
    try:
        return MEDIA_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unsupported media kind: {kind!r}") from None


class TMDBClient:
    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        retry: Optional[RetryPolicy] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        # Without a session each call goes through requests.get, so no
        # connection state is shared between worker threads.
        self.session = session
        self.retry = retry or RetryPolicy()
        self.timeout = timeout
        self.base = BASE_URL

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "TMDBClient":
        return cls(api_key=settings.tmdb_api_key, timeout=settings.timeout, **kwargs)

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        url = f"{self.base}{path}"
        params = dict(params or {})
        params["api_key"] = self.api_key

        def attempt() -> Dict[str, Any]:
            get = self.session.get if self.session is not None else requests.get
            resp = get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()

        return self.retry.call(attempt, description=f"GET {path}")

    def find_by_imdb_id(self, imdb_id: str, kind: str) -> Optional[int]:
        """Return the TMDB id for an IMDb id, or None when TMDB has no match.

        :param imdb_id: IMDb identifier such as ``tt0133093``.
        :param kind: "movie" or "series"; selects ``movie_results`` or
            ``tv_results`` from the lookup response.
        """
        data = self._get(f"/find/{imdb_id}", params={"external_source": "imdb_id"})
        key = "movie_results" if tmdb_media_type(kind) == "movie" else "tv_results"
        results = data.get(key) or []
        if not results:
            return None
        tmdb_id = results[0].get("id")
        return int(tmdb_id) if tmdb_id is not None else None

    def get_details(self, kind: str, tmdb_id: int) -> SourceItem:
        data = self._get(f"/{tmdb_media_type(kind)}/{tmdb_id}")
        data.setdefault("id", tmdb_id)
        return SourceItem.model_validate(data)

    def get_similar(self, kind: str, tmdb_id: int) -> List[Candidate]:
        data = self._get(f"/{tmdb_media_type(kind)}/{tmdb_id}/similar", params={"page": 1})
        return parse_candidates(data.get("results", []))

    def get_recommendations(self, kind: str, tmdb_id: int) -> List[Candidate]:
        data = self._get(f"/{tmdb_media_type(kind)}/{tmdb_id}/recommendations", params={"page": 1})
        return parse_candidates(data.get("results", []))
