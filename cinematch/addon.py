"""Add-on manifest and stream handler.

The handler is the only entry point the media browser calls. It never
raises: unresolved ids, upstream failures and unexpected errors all
produce an empty stream list and a log line.
"""

from __future__ import annotations

import logging
import time
from typing import List

from . import __version__
from .models import Manifest, Stream
from .services.recommender import Recommender
from .services.streams import to_streams
from .services.tmdb import MEDIA_TYPES, TMDBClient

logger = logging.getLogger(__name__)

MANIFEST = Manifest(
    id="org.cinematch",
    version=__version__,
    name="CineMatch",
    description=(
        "Your personal movie matchmaker. Get intelligent recommendations for movies "
        "and shows based on what you love, powered by TMDb."
    ),
    types=["movie", "series"],
    resources=["stream"],
    idPrefixes=["tt"],
    catalogs=[],
    logo="https://raw.githubusercontent.com/Stremio/stremio-art/main/addon-logo-example.png",
    background="https://i.imgur.com/jAgoDXt.png",
    contactEmail="YOUR_EMAIL@example.com",
)


def base_id(item_id: str) -> str:
    """Strip season/episode suffixes: ``tt0903747:1:2`` -> ``tt0903747``."""
    return item_id.split(":")[0]


class StreamHandler:
    def __init__(self, tmdb: TMDBClient, recommender: Recommender) -> None:
        self.tmdb = tmdb
        self.recommender = recommender

    def __call__(self, kind: str, item_id: str) -> List[Stream]:
        logger.info("[StreamHandler] Processing request for %s:%s", kind, item_id)
        started = time.monotonic()
        if kind not in MEDIA_TYPES:
            logger.warning("[StreamHandler] Unsupported type %r", kind)
            return []
        imdb_id = base_id(item_id)
        try:
            tmdb_id = self.tmdb.find_by_imdb_id(imdb_id, kind)
            if tmdb_id is None:
                logger.warning("[StreamHandler] No TMDB id found for %s:%s", kind, imdb_id)
                return []
            logger.info("[StreamHandler] Resolved %s to TMDB id %s", imdb_id, tmdb_id)
            ranked = self.recommender.recommend(kind, tmdb_id)
            streams = to_streams(kind, ranked)
        except Exception:
            logger.exception("Error in StreamHandler for %s:%s", kind, item_id)
            return []
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            "[StreamHandler] Completed in %.0fms. Found %d recommendations", elapsed_ms, len(streams)
        )
        return streams
