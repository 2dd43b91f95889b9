"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

from typing import List
from urllib.parse import urlparse


def clean_url(url: str) -> str:
    """Drop the query string and surrounding whitespace."""
    index = url.find("?")
    if index >= 0:
        url = url[:index]
    return url.strip()


def path_segments(value: str) -> List[str]:
    """Split on ``/`` and keep only non-blank, trimmed segments."""
    segments = (segment.strip() for segment in value.split("/"))
    return [segment for segment in segments if segment]


def url_extension(url: str) -> str:
    """Return the file extension of the URL path, including the dot."""
    name = urlparse(url).path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:]
