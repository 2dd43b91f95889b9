"""Data models used throughout the poster pipeline."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import List

from .sources import title_id_from_url
from .utils import url_extension


@dataclass(frozen=True)
class Poster:
    """One image URL found for a movie.

    ``index`` is the position of the image within the movie's result set:
    0 is the primary poster, higher indices are alternate resolutions.
    """

    movie_url: str
    image_url: str
    index: int

    @property
    def title_id(self) -> str:
        title_id, _ = title_id_from_url(self.movie_url)
        return title_id

    def filename(self) -> str:
        """``<title id>-<two digit index><extension of the image URL>``."""
        return f"{self.title_id}-{self.index:02d}{url_extension(self.image_url)}"


@dataclass(frozen=True)
class MovieTitle:
    """Displayed title of a movie page."""

    title_id: str
    title: str

    def __str__(self) -> str:
        return f"{self.title_id} {self.title}"


@dataclass
class CollectResult:
    """Posters found for a batch of references and the failures met on the way."""

    posters: List[Poster] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    @property
    def image_urls(self) -> List[str]:
        return [poster.image_url for poster in self.posters]


class ResultCollector:
    """Append-only poster and error lists shared by concurrent tasks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._posters: List[Poster] = []
        self._errors: List[Exception] = []

    def add_posters(self, posters: List[Poster]) -> None:
        with self._lock:
            self._posters.extend(posters)

    def add_error(self, error: Exception) -> None:
        with self._lock:
            self._errors.append(error)

    def result(self) -> CollectResult:
        with self._lock:
            return CollectResult(list(self._posters), list(self._errors))
