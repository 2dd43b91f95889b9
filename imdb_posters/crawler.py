"""High-level orchestration for collecting and downloading posters.

Every reference (and later every image) gets its own worker thread. Tasks are
launched one after another with a fixed pause in between; the pause bounds the
request rate but not the number of requests in flight. A failing task only
records its error, siblings keep running and every call waits for all tasks.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

import requests

from .config import ScrapeConfig
from .errors import InvalidReference, PosterError
from .images import ProgressHandler, download, ensure_directory
from .models import CollectResult, MovieTitle, Poster, ResultCollector
from .scraper import PosterScraper
from .sources import normalize

logger = logging.getLogger("imdb_posters")

T = TypeVar("T")


def run_paced(items: Sequence[T], task: Callable[[T], None], delay: float) -> None:
    """Run ``task`` for every item on its own thread, pausing between launches."""
    if not items:
        return
    with ThreadPoolExecutor(max_workers=len(items)) as executor:
        futures = []
        for position, item in enumerate(items):
            if position and delay > 0:
                time.sleep(delay)
            futures.append(executor.submit(task, item))
        wait(futures)
    for future in futures:
        future.result()


def collect_posters(
    references: Sequence[str],
    scraper: PosterScraper,
    config: Optional[ScrapeConfig] = None,
) -> CollectResult:
    """Locate the posters of every reference concurrently."""
    config = config or scraper.config
    collector = ResultCollector()

    def task(reference: str) -> None:
        try:
            movie_url, ok = normalize(reference, config.base_url)
            if not ok:
                raise InvalidReference(f"invalid movie reference: {reference}", reference)
            images = scraper.locate(movie_url)
        except PosterError as exc:
            logger.debug("Collecting %s failed: %s", reference, exc)
            collector.add_error(exc)
            return
        collector.add_posters(
            [
                Poster(movie_url=movie_url, image_url=image_url, index=index)
                for index, image_url in enumerate(images)
            ]
        )

    run_paced(references, task, config.wait_between_requests)
    return collector.result()


def list_titles(
    references: Sequence[str],
    scraper: PosterScraper,
    config: Optional[ScrapeConfig] = None,
) -> Tuple[List[MovieTitle], List[Exception]]:
    """Extract the displayed title of every reference concurrently."""
    config = config or scraper.config
    collector = ResultCollector()
    lock = threading.Lock()
    titles: List[Tuple[int, MovieTitle]] = []

    def task(item: Tuple[int, str]) -> None:
        position, reference = item
        try:
            title = scraper.movie_title(reference)
        except PosterError as exc:
            collector.add_error(exc)
            return
        with lock:
            titles.append((position, title))

    run_paced(list(enumerate(references)), task, config.wait_between_requests)
    titles.sort(key=lambda entry: entry[0])
    return [title for _, title in titles], collector.result().errors


def scrape_references(
    pages: Sequence[str],
    scraper: PosterScraper,
    config: Optional[ScrapeConfig] = None,
) -> Tuple[List[str], List[Exception]]:
    """Gather movie URLs from listing pages, one page after another."""
    config = config or scraper.config
    references: List[str] = []
    errors: List[Exception] = []
    for position, page in enumerate(pages):
        if position and config.wait_between_requests > 0:
            time.sleep(config.wait_between_requests)
        try:
            links = scraper.scrape_movie_links(page)
        except PosterError as exc:
            errors.append(exc)
            continue
        logger.debug("Found %d movie link(s) on %s", len(links), page)
        references.extend(links)
    return references, errors


def download_posters(
    posters: Sequence[Poster],
    target_dir: Union[str, Path],
    config: ScrapeConfig,
    session: Optional[requests.Session] = None,
    progress: Optional[ProgressHandler] = None,
) -> List[Exception]:
    """Download every poster into ``target_dir`` and return the failures.

    Raises :class:`~imdb_posters.errors.DownloadDirectoryError` before any
    download starts when the directory cannot be created.
    """
    directory = ensure_directory(target_dir)
    collector = ResultCollector()

    def task(poster: Poster) -> None:
        try:
            download(
                poster.image_url,
                directory,
                poster.filename(),
                session=session,
                timeout=config.download_timeout,
                progress=progress,
                chunk_size=config.chunk_size,
                create_dir=False,
            )
        except PosterError as exc:
            logger.debug("Downloading %s failed: %s", poster.image_url, exc)
            collector.add_error(exc)

    run_paced(posters, task, config.wait_between_requests)
    return collector.result().errors
