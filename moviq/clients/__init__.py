"""Clients for external services."""

from .tmdb import TMDBClient, build_image_url

__all__ = ["TMDBClient", "build_image_url"]
