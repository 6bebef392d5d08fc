"""Main FastAPI application for CineMatch.

This module builds the web app that speaks the media browser's add-on
protocol: it serves the manifest and answers stream requests with
ranked TMDB recommendations. Settings are read once by :func:`main`
and handed to :func:`create_app`; tests call the factory directly with
their own settings and client.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .addon import MANIFEST, StreamHandler
from .config import HOST, PORT, ConfigError, Settings, configure_logging
from .models import Manifest, StreamResponse
from .services.recommender import Recommender
from .services.tmdb import TMDBClient

logger = logging.getLogger(__name__)


def create_app(settings: Settings, tmdb: Optional[TMDBClient] = None) -> FastAPI:
    tmdb = tmdb or TMDBClient.from_settings(settings)
    reco = Recommender(
        tmdb=tmdb,
        minimum_vote_count=settings.minimum_vote_count,
        max_results=settings.max_recommendations,
    )
    handler = StreamHandler(tmdb=tmdb, recommender=reco)

    app = FastAPI(title=MANIFEST.name, version=MANIFEST.version)
    # Media browsers load add-ons cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz() -> Dict[str, Any]:
        return {"ok": True}

    @app.get("/manifest.json", response_model=Manifest)
    def manifest() -> Manifest:
        return MANIFEST

    @app.get("/stream/{kind}/{item_id}.json", response_model=StreamResponse)
    def stream(kind: str, item_id: str) -> StreamResponse:
        """Return ranked recommendations for a title as pseudo-streams."""
        return StreamResponse(streams=handler(kind, item_id))

    return app


def main() -> None:
    """Read settings, start the server on the fixed add-on port."""
    configure_logging()
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    configure_logging(settings.log_level)

    app = create_app(settings)
    url = f"http://127.0.0.1:{PORT}"
    logger.info("=== CineMatch Addon Active ===")
    logger.info("URL: %s", url)
    logger.info("Add to Stremio: %s/manifest.json", url)
    try:
        uvicorn.run(app, host=HOST, port=PORT)
    except Exception:
        logger.exception("Error in Server Startup")
        sys.exit(1)


if __name__ == "__main__":
    main()
