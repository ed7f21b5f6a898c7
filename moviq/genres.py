"""Static TMDB genre identifiers, sort options and discovery categories."""

from __future__ import annotations

from collections.abc import Iterable

# Standard genre IDs published by TMDB.
GENRE_MAPPINGS: dict[str, int] = {
    "action": 28,
    "adventure": 12,
    "animation": 16,
    "comedy": 35,
    "crime": 80,
    "documentary": 99,
    "drama": 18,
    "family": 10751,
    "fantasy": 14,
    "history": 36,
    "horror": 27,
    "music": 10402,
    "mystery": 9648,
    "romance": 10749,
    "science-fiction": 878,
    "sci-fi": 878,  # alias
    "tv-movie": 10770,
    "thriller": 53,
    "war": 10752,
    "western": 37,
}

GENRE_NAMES: dict[str, str] = {
    "action": "Action",
    "adventure": "Adventure",
    "animation": "Animation",
    "comedy": "Comedy",
    "crime": "Crime",
    "documentary": "Documentary",
    "drama": "Drama",
    "family": "Family",
    "fantasy": "Fantasy",
    "history": "History",
    "horror": "Horror",
    "music": "Music",
    "mystery": "Mystery",
    "romance": "Romance",
    "science-fiction": "Science Fiction",
    "sci-fi": "Sci-Fi",
    "tv-movie": "TV Movie",
    "thriller": "Thriller",
    "war": "War",
    "western": "Western",
}

SORT_OPTIONS: dict[str, str] = {
    "popularity.desc": "Popularity (High to Low)",
    "popularity.asc": "Popularity (Low to High)",
    "vote_average.desc": "Rating (High to Low)",
    "vote_average.asc": "Rating (Low to High)",
    "release_date.desc": "Release Date (Newest)",
    "release_date.asc": "Release Date (Oldest)",
    "original_title.asc": "Title (A-Z)",
    "original_title.desc": "Title (Z-A)",
}
DEFAULT_SORT = "popularity.desc"

DISCOVERY_TYPES: dict[str, str] = {
    "trending": "Trending",
    "top-rated": "Top Rated",
    "upcoming": "Upcoming",
    "now-playing": "Now Playing",
}

# Canonical display name per id; aliases never win over the primary slug.
_NAMES_BY_ID: dict[int, str] = {}
for _slug, _genre_id in GENRE_MAPPINGS.items():
    _NAMES_BY_ID.setdefault(_genre_id, GENRE_NAMES[_slug])


def resolve_genre(slug: str) -> int:
    """Return the TMDB id for ``slug`` (case-insensitive, spaces allowed)."""

    normalized = "-".join(slug.strip().lower().split())
    try:
        return GENRE_MAPPINGS[normalized]
    except KeyError:
        raise ValueError(f"Unknown genre: {slug!r}") from None


def genre_name(genre_id: int) -> str | None:
    return _NAMES_BY_ID.get(genre_id)


def genre_names_for(genre_ids: Iterable[int]) -> list[str]:
    """Map ids to display names, skipping ids TMDB has not published."""

    names: list[str] = []
    for genre_id in genre_ids:
        name = genre_name(genre_id)
        if name is not None:
            names.append(name)
    return names


def validate_sort(sort_by: str) -> str:
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unsupported sort option: {sort_by!r}")
    return sort_by


def validate_category(category: str) -> str:
    if category not in DISCOVERY_TYPES:
        raise ValueError(f"Unknown discovery category: {category!r}")
    return category
