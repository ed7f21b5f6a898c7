"""Presentation helpers shared by the terminal views."""

from __future__ import annotations

from datetime import date


def format_runtime(minutes: int | None) -> str | None:
    """Render a runtime such as ``148`` as ``"2h 28m"``."""

    if not minutes or minutes <= 0:
        return None
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"


def format_money(amount: int | None) -> str | None:
    """Render budget/revenue in millions, e.g. ``160000000`` -> ``"$160.0M"``."""

    if not amount or amount <= 0:
        return None
    return f"${amount / 1_000_000:.1f}M"


def format_rating(value: float) -> str:
    return f"{value:.1f}"


def release_year(release_date: date | None) -> str:
    if release_date is None:
        return "—"
    return str(release_date.year)


def truncate(text: str, limit: int = 120) -> str:
    """Shorten ``text`` to ``limit`` characters on a word boundary."""

    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0].rstrip(",.;:")
    return f"{cut}…"
