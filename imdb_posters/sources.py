"""Validation and normalisation of user supplied movie references.

A reference may be a bare title ID (``tt0149460``), a path (``/title/tt0149460/``
or ``title/tt0149460``), a URL without scheme (``www.imdb.com/title/...`` or
``imdb.com/title/...``) or a full URL. Everything is turned into a canonical
``https://www.imdb.com/title/<id>/...`` page URL.
"""

from __future__ import annotations

import re
from typing import Tuple
from urllib.parse import urlparse

from .config import IMDB_BASE_URL
from .utils import clean_url, path_segments

TITLE_ID_PATTERN = re.compile(r"tt[0-9]+", re.IGNORECASE)
TITLE_SEGMENT_PATTERN = re.compile(r"((?:^|/)title/)[tT]{2}(?=[0-9])")


def _origin(base_url: str) -> Tuple[str, str]:
    """Return ``(origin, host)`` for a base URL such as ``https://www.imdb.com/``."""
    parsed = urlparse(base_url)
    return f"{parsed.scheme}://{parsed.netloc}", parsed.netloc


def is_title_id(value: str) -> bool:
    return TITLE_ID_PATTERN.fullmatch(value) is not None


def make_url_from_title_id(title_id: str, base_url: str = IMDB_BASE_URL) -> str:
    """Build the canonical title page URL; the ``tt`` prefix is lower-cased."""
    origin, _ = _origin(base_url)
    return f"{origin}/title/tt{title_id[2:]}/"


def normalize(reference: str, base_url: str = IMDB_BASE_URL) -> Tuple[str, bool]:
    """Turn a movie reference into a canonical title page URL.

    Returns the URL and ``True`` on success. On failure the cleaned input is
    returned together with ``False``. The first matching rule wins. An upper
    case ``TT`` prefix of the title segment is lower-cased.
    """
    source = TITLE_SEGMENT_PATTERN.sub(r"\1tt", clean_url(reference), count=1)
    origin, host = _origin(base_url)
    bare_host = host[4:] if host.startswith("www.") else host

    if source.startswith((f"https://{host}/title/", f"http://{host}/title/")):
        return source, True
    if source.startswith(f"{host}/title/"):
        return "https://" + source, True
    if source.startswith(f"{bare_host}/title/"):
        return "https://www." + source, True
    if source.startswith("/title/tt"):
        return origin + source, True
    if source.startswith("title/tt"):
        return f"{origin}/{source}", True
    if is_title_id(source):
        return make_url_from_title_id(source, base_url), True
    return source, False


def title_id_from_url(url: str) -> Tuple[str, bool]:
    """Return the segment following ``title`` in a title page URL."""
    if "title/tt" not in url:
        return "", False
    segments = path_segments(url)
    try:
        index = segments.index("title")
    except ValueError:
        return "", False
    if index == len(segments) - 1:
        return "", False
    return segments[index + 1], True


def media_id_from_url(url: str) -> Tuple[str, bool]:
    """Return the last path segment of a media viewer URL."""
    segments = path_segments(clean_url(url))
    if not segments:
        return "", False
    return segments[-1], True


def validate_site_url(url: str, base_url: str = IMDB_BASE_URL) -> Tuple[str, bool]:
    """Accept any page on the site, adding the scheme when it is missing."""
    url = url.strip()
    _, host = _origin(base_url)
    if url.startswith((f"https://{host}", f"http://{host}")):
        return url, True
    if url.startswith(host):
        return "https://" + url, True
    return url, False
