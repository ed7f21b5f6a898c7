"""Rich renderers for the terminal views."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from moviq.formatting import (
    format_money,
    format_rating,
    format_runtime,
    release_year,
    truncate,
)
from moviq.genres import GENRE_MAPPINGS, GENRE_NAMES, genre_names_for
from moviq.notifications import Toast
from moviq.schemas.movie import Movie, MovieDetails
from moviq.services.discovery_service import MovieListPage

console = Console()

_TOAST_STYLES = {
    "success": ("green", "✓"),
    "error": ("red", "✗"),
    "info": ("blue", "ℹ"),
}


def print_error(text: str) -> None:
    console.print(f"[red]✗ {escape(text)}[/red]")


def print_info(text: str) -> None:
    console.print(f"[blue]ℹ {escape(text)}[/blue]")


def print_toasts(toasts: Iterable[Toast]) -> None:
    for toast in toasts:
        color, icon = _TOAST_STYLES[toast.kind]
        console.print(Text(f"{icon} {toast.message}", style=color))


def movie_table(
    title: str,
    movies: Sequence[Movie],
    *,
    favorite_ids: set[int] | frozenset[int] = frozenset(),
) -> Table:
    """Build a table with one row per movie; favorites are starred."""

    table = Table(title=Text(title, style="table.title"), title_justify="left", expand=False)
    table.add_column("", width=1)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold", no_wrap=True)
    table.add_column("Year", justify="center", no_wrap=True)
    table.add_column("Rating", justify="right", no_wrap=True)
    table.add_column("Genres", overflow="ellipsis")

    for movie in movies:
        table.add_row(
            "★" if movie.id in favorite_ids else "",
            str(movie.id),
            Text(truncate(movie.title, 48)),
            release_year(movie.release_date),
            format_rating(movie.vote_average),
            ", ".join(genre_names_for(movie.genre_ids)),
        )
    return table


def print_movies(
    title: str,
    movies: Sequence[Movie],
    *,
    favorite_ids: set[int] | frozenset[int] = frozenset(),
    empty_message: str = "No movies to show.",
) -> None:
    if not movies:
        console.print(f"[bold]{escape(title)}[/bold]")
        print_info(empty_message)
        return
    console.print(movie_table(title, movies, favorite_ids=favorite_ids))


def print_list_page(page: MovieListPage, *, favorite_ids: set[int] | frozenset[int] = frozenset()) -> None:
    if page.error:
        console.print(f"[bold]{escape(page.title)}[/bold]")
        print_error(page.error)
        return
    if page.is_empty:
        console.print(f"[bold]{escape(page.title)}[/bold]")
        print_info("No results found. Try searching for a different term.")
        return

    console.print(movie_table(page.title, page.movies, favorite_ids=favorite_ids))
    footer = f"Page {page.page} of {page.total_pages} · {page.total_results} results"
    if page.has_next_page:
        footer += f" · next: --page {page.page + 1}"
    console.print(f"[dim]{footer}[/dim]")


def print_movie_details(
    details: MovieDetails,
    *,
    is_favorite: bool,
    poster_url: str | None = None,
    backdrop_url: str | None = None,
) -> None:
    """Render the detail view: header facts, overview and money stats."""

    facts = [release_year(details.release_date)]
    runtime = format_runtime(details.runtime)
    if runtime:
        facts.append(runtime)
    if details.status:
        facts.append(details.status)

    body = Text()
    body.append(" • ".join(facts), style="dim")
    body.append("\n")
    if details.genres:
        body.append(", ".join(genre.name for genre in details.genres), style="magenta")
        body.append("\n")
    if details.tagline:
        body.append(f"\n“{details.tagline}”\n", style="italic")
    if details.overview:
        body.append(f"\n{details.overview}\n")

    body.append(
        f"\nRating {format_rating(details.vote_average)} ({details.vote_count} votes)"
    )
    budget = format_money(details.budget)
    if budget:
        body.append(f" · Budget {budget}")
    revenue = format_money(details.revenue)
    if revenue:
        body.append(f" · Revenue {revenue}")
    if details.homepage:
        body.append(f"\nHomepage: {details.homepage}")
    if poster_url:
        body.append(f"\nPoster: {poster_url}")
    if backdrop_url:
        body.append(f"\nBackdrop: {backdrop_url}")

    star = "★ " if is_favorite else ""
    console.print(Panel(body, title=Text(f"{star}{details.title} [{details.id}]"), title_align="left"))


def print_favorites(movies: Sequence[Movie]) -> None:
    if not movies:
        console.print("[bold]My Favorites[/bold]")
        print_info("You haven't added any favorites yet.")
        return
    console.print(movie_table(f"My Favorites ({len(movies)})", movies))


def print_genres() -> None:
    table = Table(title="Genres", title_justify="left")
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("TMDB ID", justify="right")
    for slug, genre_id in GENRE_MAPPINGS.items():
        table.add_row(slug, GENRE_NAMES[slug], str(genre_id))
    console.print(table)
