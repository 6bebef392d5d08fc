"""CineMatch: TMDB-powered recommendations served as media-browser streams."""

__version__ = "1.0.0"
