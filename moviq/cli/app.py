"""Command-line entry point for MovIQ.

Usage:
    moviq home
    moviq movie 27205 --favorite
    moviq search "the dark knight" --page 2
    moviq discover --genre sci-fi --sort vote_average.desc
    moviq favorites list
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click

from moviq.cli import display
from moviq.genres import DEFAULT_SORT, DISCOVERY_TYPES, SORT_OPTIONS
from moviq.schemas.result import Failure
from moviq.services.dependencies import AppContainer, open_container
from moviq.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_MESSAGE = "Something went wrong. Please try running the command again."


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def _validate_environment(settings: AppSettings) -> None:
    """Log warnings for configuration that limits what the CLI can do."""

    warnings = settings.optional_config_warnings()
    if warnings:
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")


def _run(settings: AppSettings, handler: Callable[[AppContainer], Awaitable[T]]) -> T:
    """Build the container, run ``handler`` on the event loop and flush toasts."""

    async def _main() -> T:
        async with open_container(settings) as container:
            try:
                return await handler(container)
            finally:
                display.print_toasts(container.toasts.drain())

    return asyncio.run(_main())


class ErrorBoundaryGroup(click.Group):
    """Click group that turns unexpected exceptions into a generic fallback.

    Usage errors and explicit exits keep click's own handling; anything else is
    logged with its traceback and reported as a one-line message with exit
    status 1.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.exceptions.Exit, click.exceptions.Abort):
            raise
        except Exception:
            logger.exception("Unhandled error while running command")
            display.print_error(FALLBACK_MESSAGE)
            ctx.exit(1)


@click.group(cls=ErrorBoundaryGroup)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL for this invocation.",
)
@click.option(
    "--storage-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file used to persist favorites.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, storage_path: Path | None) -> None:
    """Discover trending movies and keep a list of favorites."""

    settings = ctx.obj if isinstance(ctx.obj, AppSettings) else get_settings()
    updates: dict[str, object] = {}
    if log_level:
        updates["log_level"] = log_level.upper()
    if storage_path is not None:
        updates["storage_path"] = storage_path
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging(settings.log_level_numeric)
    _validate_environment(settings)
    ctx.obj = settings


@cli.command()
@click.pass_obj
def home(settings: AppSettings) -> None:
    """Trending movies and recommendations."""

    async def handler(container: AppContainer) -> None:
        feed = await container.discovery.home_feed()
        if feed.error:
            display.print_error(feed.error)
            return
        favorite_ids = {movie.id for movie in container.favorites.list()}
        display.print_movies("Trending Movies", feed.trending, favorite_ids=favorite_ids)
        if feed.seed is not None:
            display.print_movies(
                f"Recommended For You (because of {feed.seed.title})",
                feed.recommended,
                favorite_ids=favorite_ids,
            )

    _run(settings, handler)


@cli.command()
@click.argument("movie_id", type=int)
@click.option(
    "--favorite/--unfavorite",
    "favorite",
    default=None,
    help="Add the movie to, or remove it from, favorites.",
)
@click.pass_obj
def movie(settings: AppSettings, movie_id: int, favorite: bool | None) -> None:
    """Show details and recommendations for MOVIE_ID."""

    async def handler(container: AppContainer) -> None:
        page = await container.discovery.movie_page(movie_id)
        if page.not_found:
            display.print_error(f"Movie {movie_id} not found")
            return
        if page.error or page.details is None:
            display.print_error(page.error or "Movie details unavailable")
            return

        details = page.details
        if favorite is True:
            container.favorites.add(details)
        elif favorite is False:
            container.favorites.remove(details.id)

        display.print_movie_details(
            details,
            is_favorite=container.favorites.is_favorite(details.id),
            poster_url=container.client.poster_url(details.poster_path),
            backdrop_url=container.client.backdrop_url(details.backdrop_path),
        )
        favorite_ids = {item.id for item in container.favorites.list()}
        display.print_movies(
            "You May Also Like",
            page.recommendations,
            favorite_ids=favorite_ids,
            empty_message="No recommendations for this movie.",
        )

    _run(settings, handler)


@cli.command()
@click.argument("query", nargs=-1)
@click.option("--page", type=click.IntRange(1, 500), default=1, show_default=True)
@click.pass_obj
def search(settings: AppSettings, query: tuple[str, ...], page: int) -> None:
    """Search movies by title."""

    text = " ".join(query)

    async def handler(container: AppContainer) -> None:
        result = await container.discovery.search_page(text, page)
        favorite_ids = {movie.id for movie in container.favorites.list()}
        display.print_list_page(result, favorite_ids=favorite_ids)

    _run(settings, handler)


@cli.command()
@click.option(
    "--category",
    type=click.Choice(sorted(DISCOVERY_TYPES)),
    default=None,
    help="Discovery list to browse (default: trending).",
)
@click.option("--genre", default=None, help="Genre slug, see `moviq genres`.")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(list(SORT_OPTIONS)),
    default=DEFAULT_SORT,
    show_default=True,
    help="Ordering used with --genre.",
)
@click.option("--page", type=click.IntRange(1, 500), default=1, show_default=True)
@click.pass_obj
def discover(
    settings: AppSettings,
    category: str | None,
    genre: str | None,
    sort_by: str,
    page: int,
) -> None:
    """Browse a discovery category or a genre."""

    if category and genre:
        raise click.UsageError("Use either --category or --genre, not both.")

    async def handler(container: AppContainer) -> None:
        try:
            result = await container.discovery.discover_page(
                category=category, genre=genre, sort_by=sort_by, page=page
            )
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--genre") from exc
        favorite_ids = {movie.id for movie in container.favorites.list()}
        display.print_list_page(result, favorite_ids=favorite_ids)

    _run(settings, handler)


@cli.command()
def genres() -> None:
    """List genre slugs accepted by `discover --genre`."""

    display.print_genres()


@cli.group()
def favorites() -> None:
    """Manage favorite movies."""


@favorites.command("list")
@click.pass_obj
def favorites_list(settings: AppSettings) -> None:
    """Show favorites in the order they were added."""

    async def handler(container: AppContainer) -> None:
        display.print_favorites(container.discovery.favorites_page())

    _run(settings, handler)


@favorites.command("add")
@click.argument("movie_id", type=int)
@click.pass_obj
def favorites_add(settings: AppSettings, movie_id: int) -> None:
    """Look up MOVIE_ID in the catalog and add it to favorites."""

    async def handler(container: AppContainer) -> None:
        if container.favorites.is_favorite(movie_id):
            display.print_info(f"Movie {movie_id} is already a favorite")
            return
        result = await container.discovery.add_favorite_by_id(movie_id)
        if isinstance(result, Failure):
            if result.error.is_not_found:
                display.print_error(f"Movie {movie_id} not found")
            else:
                display.print_error(result.error.message)

    _run(settings, handler)


@favorites.command("remove")
@click.argument("movie_id", type=int)
@click.pass_obj
def favorites_remove(settings: AppSettings, movie_id: int) -> None:
    """Remove MOVIE_ID from favorites."""

    async def handler(container: AppContainer) -> None:
        if not container.favorites.remove(movie_id):
            display.print_info(f"Movie {movie_id} is not in favorites")

    _run(settings, handler)


@favorites.command("clear")
@click.confirmation_option(prompt="Remove every favorite?")
@click.pass_obj
def favorites_clear(settings: AppSettings) -> None:
    """Remove every favorite."""

    async def handler(container: AppContainer) -> None:
        container.favorites.clear()

    _run(settings, handler)


def main() -> None:
    cli(prog_name="moviq")


if __name__ == "__main__":
    main()
