"""MovIQ: movie discovery on top of the TMDB catalog API."""

__version__ = "0.1.0"
