"""Page fetching and poster lookup against the movie database site."""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .config import ScrapeConfig
from .content import (
    find_media_viewer_path,
    find_movie_links,
    find_movie_title,
    find_poster_images,
)
from .errors import (
    InvalidReference,
    MediaViewerNotFound,
    NetworkError,
    NoPostersFound,
    TitleNotFound,
)
from .models import MovieTitle
from .sources import (
    media_id_from_url,
    normalize,
    title_id_from_url,
    validate_site_url,
)

logger = logging.getLogger("imdb_posters")


def build_session(config: ScrapeConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": config.user_agent,
            "Accept-Language": "en-US,en;q=0.5",
        }
    )
    return session


class PosterScraper:
    """Locate poster images and titles for canonical movie URLs.

    One blocking GET per page, no retries. Every failure surfaces as a
    :class:`~imdb_posters.errors.PosterError` subclass.
    """

    def __init__(
        self,
        config: ScrapeConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or build_session(config)

    def fetch(self, url: str) -> BeautifulSoup:
        """GET ``url`` and parse the body into a queryable document."""
        logger.debug("Fetching %s", url)
        try:
            resp = self.session.get(url)
            resp.raise_for_status()
            html = resp.text
        except requests.RequestException as exc:
            raise NetworkError(f"request failed: {url}: {exc}", url) from exc
        return BeautifulSoup(html, "html.parser")

    def find_media_viewer(self, movie_url: str) -> str:
        """Return the absolute media viewer URL linked from a title page."""
        title_id, _ = title_id_from_url(movie_url)
        soup = self.fetch(movie_url)
        path = find_media_viewer_path(soup, title_id)
        if not path:
            raise MediaViewerNotFound(f"could not find mediaviewer: {movie_url}", movie_url)
        return urljoin(self.config.base_url, path)

    def find_posters_in_media_viewer(self, media_viewer_url: str) -> List[str]:
        media_id, ok = media_id_from_url(media_viewer_url)
        if not ok:
            raise NoPostersFound(
                f"could not retrieve media id: {media_viewer_url}", media_viewer_url
            )
        soup = self.fetch(media_viewer_url)
        images = find_poster_images(soup, media_id, self.config.all_resolutions)
        if not images:
            raise NoPostersFound(
                f"could not find any posters: {media_viewer_url}", media_viewer_url
            )
        return images

    def locate(self, movie_url: str) -> List[str]:
        """Return the poster image URLs of a movie, primary poster first."""
        media_viewer_url = self.find_media_viewer(movie_url)
        images = self.find_posters_in_media_viewer(media_viewer_url)
        logger.debug("Found %d image(s) for %s", len(images), movie_url)
        return images

    def extract_title(self, movie_url: str) -> str:
        soup = self.fetch(movie_url)
        title = find_movie_title(soup)
        if title is None:
            raise TitleNotFound(f"could not find title: {movie_url}", movie_url)
        return title

    def movie_title(self, reference: str) -> MovieTitle:
        """Normalise a reference and return its title ID and displayed title."""
        movie_url, ok = normalize(reference, self.config.base_url)
        if not ok:
            raise InvalidReference(f"invalid movie reference: {reference}", reference)
        title_id, _ = title_id_from_url(movie_url)
        return MovieTitle(title_id=title_id, title=self.extract_title(movie_url))

    def scrape_movie_links(self, page_url: str) -> List[str]:
        """Return the canonical movie URLs linked from any page of the site."""
        url, ok = validate_site_url(page_url, self.config.base_url)
        if not ok:
            raise InvalidReference(f"invalid IMDb URL: {page_url}", page_url)
        soup = self.fetch(url)

        movies: List[str] = []
        for link in find_movie_links(soup):
            movie_url, ok = normalize(link, self.config.base_url)
            if not ok:
                logger.debug("Skipping invalid source %s", link)
                continue
            if movie_url not in movies:
                movies.append(movie_url)
        return movies
