"""Image downloading with progress reporting."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import requests
from filetype import guess

from .config import DEFAULT_DOWNLOAD_TIMEOUT
from .errors import DownloadDirectoryError, DownloadError

logger = logging.getLogger("imdb_posters")


class ProgressHandler(Protocol):
    """Receives the three phases of a download."""

    def start(self, url: str) -> None: ...

    def update(
        self, url: str, fraction: float, bytes_read: int, total_bytes: int
    ) -> None: ...

    def done(self, url: str) -> None: ...


class NullProgress:
    def start(self, url: str) -> None:
        pass

    def update(self, url: str, fraction: float, bytes_read: int, total_bytes: int) -> None:
        pass

    def done(self, url: str) -> None:
        pass


def detect_image_extension(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def ensure_directory(target_dir: Union[str, Path]) -> Path:
    path = Path(target_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DownloadDirectoryError(
            f"could not create directory {path}: {exc}", str(path)
        ) from exc
    return path


def _remove_partial(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Failed to remove partial file %s: %s", path, exc)


def download(
    url: str,
    target_dir: Union[str, Path],
    filename: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
    progress: Optional[ProgressHandler] = None,
    chunk_size: int = 8192,
    create_dir: bool = True,
) -> Path:
    """Stream ``url`` into ``target_dir/filename`` and return the written path.

    When ``filename`` has no extension one is guessed from the first bytes of
    the image. Partially written files are removed on failure. Pass
    ``create_dir=False`` when the caller already created ``target_dir``.
    """
    progress = progress or NullProgress()
    http = session or requests
    directory = ensure_directory(target_dir) if create_dir else Path(target_dir)
    destination = directory / filename

    progress.start(url)
    try:
        with http.get(url, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            total = _content_length(resp.headers)
            chunks = resp.iter_content(chunk_size=chunk_size)
            first = next((chunk for chunk in chunks if chunk), b"")
            if not destination.suffix:
                extension = detect_image_extension(first)
                if extension:
                    destination = destination.with_name(f"{filename}.{extension}")

            bytes_read = 0
            with destination.open("wb") as handle:
                for chunk in _prepend(first, chunks):
                    if not chunk:
                        continue
                    handle.write(chunk)
                    bytes_read += len(chunk)
                    fraction = bytes_read / total if total else 0.0
                    progress.update(url, fraction, bytes_read, total)
    except requests.RequestException as exc:
        _remove_partial(destination)
        raise DownloadError(f"failed to download {url}: {exc}", url) from exc
    except OSError as exc:
        _remove_partial(destination)
        raise DownloadError(f"failed to write {destination}: {exc}", url) from exc

    if total and bytes_read < total:
        _remove_partial(destination)
        raise DownloadError(
            f"incomplete download {url}: {bytes_read} of {total} bytes", url
        )

    progress.done(url)
    logger.debug("Saved %s to %s", url, destination)
    return destination


def _content_length(headers) -> int:
    """Declared body size, or 0 when missing or not a number."""
    try:
        return max(int(headers.get("Content-Length") or 0), 0)
    except (TypeError, ValueError):
        return 0


def _prepend(first: bytes, chunks):
    yield first
    yield from chunks
