"""Exceptions raised while locating and downloading posters."""

from __future__ import annotations


class PosterError(Exception):
    """Base class for per-movie and per-image failures."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class InvalidReference(PosterError):
    """A movie reference could not be turned into a title URL."""


class NetworkError(PosterError):
    """A GET request failed or returned an unusable body."""


class MediaViewerNotFound(PosterError):
    """The movie page carries no link to its poster media viewer."""


class NoPostersFound(PosterError):
    """The media viewer holds no image for the targeted media item."""


class TitleNotFound(PosterError):
    """The movie page carries no recognisable title heading."""


class DownloadError(PosterError):
    """An image could not be fetched or written to disk."""


class DownloadDirectoryError(DownloadError):
    """The download target directory could not be created."""
