"""Command-line entry point for the IMDb poster grabber."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from .config import ScrapeConfig
from .crawler import collect_posters, download_posters, list_titles, scrape_references
from .errors import DownloadDirectoryError
from .scraper import PosterScraper

logger = logging.getLogger("imdb_posters.cli")

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off"}


def _flag_value(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def _add_flag(parser: argparse.ArgumentParser, *names: str, help: str) -> None:
    """Boolean switch that also accepts ``-name=true`` / ``-name=false``."""
    parser.add_argument(
        *names,
        nargs="?",
        const=True,
        default=False,
        type=_flag_value,
        help=help,
    )


class Console:
    """Prints user facing output unless silenced."""

    def __init__(self, verbose: bool = True) -> None:
        self.verbose = verbose

    def print(self, message: str = "", end: str = "\n") -> None:
        if self.verbose:
            sys.stdout.write(message + end)
            sys.stdout.flush()


class ConsoleProgress:
    """Draws a dot per received chunk and a cheer per finished download."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def start(self, url: str) -> None:
        pass

    def update(self, url: str, fraction: float, bytes_read: int, total_bytes: int) -> None:
        self.console.print(".", end="")

    def done(self, url: str) -> None:
        self.console.print("\\o/", end="")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="imdb-posters",
        description="Find and download movie posters from IMDb.",
    )
    parser.add_argument(
        "-m",
        "--m",
        dest="movies",
        action="append",
        default=[],
        metavar="MOVIE",
        help="Movie title ID (e.g.: tt2861424) or IMDb URL (e.g.: www.imdb.com/title/tt0149460/)",
    )
    parser.add_argument(
        "-s",
        "--s",
        dest="scrape",
        action="append",
        default=[],
        metavar="URL",
        help="Scrape all movie links from an IMDb URL",
    )
    parser.add_argument(
        "-dir",
        "--dir",
        dest="target_dir",
        default="./",
        type=Path,
        help="Target directory",
    )
    parser.add_argument(
        "-wait",
        "--wait",
        "-delay",
        "--delay",
        dest="wait",
        type=int,
        default=0,
        help="Wait for n milliseconds between requests",
    )
    _add_flag(parser, "-all", "--all", help="Download all poster resolutions")
    _add_flag(parser, "-collect", "--collect", help="Don't download posters. Collect only.")
    _add_flag(parser, "-list", "--list", help="List movie titles before doing anything else")
    _add_flag(
        parser,
        "-silent",
        "--silent",
        "-shhh",
        "--shhh",
        help="Speak nothing, friend, and do not enter.",
    )
    _add_flag(parser, "-verbose", "--verbose", help="Enable verbose logging")
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.silent:
        level = logging.CRITICAL + 1
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
        force=True,
    )


def _log_errors(errors: List[Exception]) -> None:
    for error in errors:
        logger.error("%s", error)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)
    console = Console(verbose=not args.silent)

    config = ScrapeConfig(
        all_resolutions=args.all,
        wait_between_requests=max(args.wait, 0) / 1000.0,
    )

    movies = list(args.movies)
    if not movies and not args.scrape:
        console.print("Nothing to do. Bye.")
        return 0

    scraper = PosterScraper(config)
    overall_start = time.perf_counter()

    if args.scrape:
        console.print("Scraping...")
        links, errors = scrape_references(args.scrape, scraper, config)
        _log_errors(errors)
        movies.extend(links)
        if not movies:
            console.print("Nothing to do. Bye.")
            return 0

    if args.list and not args.silent:
        console.print("Listing movies")
        titles, errors = list_titles(movies, scraper, config)
        for title in titles:
            console.print(str(title))
        _log_errors(errors)
        console.print()

    if args.collect:
        console.print("Collecting posters")
        result = collect_posters(movies, scraper, config)
        _log_errors(result.errors)
        for number, image_url in enumerate(result.image_urls, start=1):
            console.print(f"#{number}: {image_url}")
        console.print()
    else:
        console.print("Downloading posters")
        result = collect_posters(movies, scraper, config)
        _log_errors(result.errors)
        try:
            errors = download_posters(
                result.posters,
                args.target_dir,
                config,
                session=scraper.session,
                progress=ConsoleProgress(console),
            )
        except DownloadDirectoryError as exc:
            logger.error("%s", exc)
        else:
            console.print()
            _log_errors(errors)

    logger.debug(
        "Finished in %.2fs (%d movie reference(s))",
        time.perf_counter() - overall_start,
        len(movies),
    )
    console.print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
