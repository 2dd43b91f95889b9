"""HTML extraction helpers tied to the IMDb page markup.

Everything that knows about selectors, class names and attributes of the
site lives here, so markup changes stay out of the orchestration code.
"""

from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from .utils import clean_url

POSTER_CLASS_MARKER = "poster"
TITLE_WRAPPER_CLASS = "title_wrapper"
TITLE_HEADER_CLASS_PREFIX = "titleheader"


def _class_string(element: Tag) -> str:
    value = element.get("class")
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)


def find_media_viewer_path(soup: BeautifulSoup, title_id: str) -> Optional[str]:
    """Return the media viewer path linked from a title page's poster."""
    anchor = soup.select_one("div.poster > a[href]")
    if anchor is not None:
        return clean_url(anchor["href"])

    prefix = f"/title/{title_id}/mediaviewer/"
    for anchor in soup.find_all("a", href=True):
        if not anchor["href"].startswith(prefix):
            continue
        parent = anchor.parent
        if parent is not None and POSTER_CLASS_MARKER in _class_string(parent):
            return clean_url(anchor["href"])
    return None


def parse_srcset(value: str) -> List[str]:
    """Return the URLs of a ``srcset`` attribute that carry a descriptor."""
    urls: List[str] = []
    for entry in value.split(","):
        tokens = [token.strip() for token in entry.split(" ")]
        tokens = [token for token in tokens if token]
        if len(tokens) == 2:
            urls.append(tokens[0])
    return urls


def find_poster_images(
    soup: BeautifulSoup, media_id: str, all_resolutions: bool = False
) -> List[str]:
    """Collect image URLs belonging to ``media_id`` in document order."""
    images: List[str] = []
    for img in soup.select("div[class] > img[src][data-image-id]"):
        if not img["data-image-id"].startswith(media_id):
            continue
        images.append(img["src"])
        if all_resolutions and img.get("srcset"):
            images.extend(parse_srcset(img["srcset"]))
    return images


def find_movie_title(soup: BeautifulSoup) -> Optional[str]:
    """Return the displayed title of a movie page, or ``None``."""
    for heading in soup.find_all("h1"):
        parent = heading.parent
        in_wrapper = (
            parent is not None
            and parent.name == "div"
            and TITLE_WRAPPER_CLASS in (parent.get("class") or [])
        )
        own_class = _class_string(heading).lower()
        if in_wrapper or own_class.startswith(TITLE_HEADER_CLASS_PREFIX):
            return heading.get_text().strip()
    return None


def find_movie_links(soup: BeautifulSoup) -> List[str]:
    """Return every cleaned link on a page that points at a title."""
    links: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = clean_url(anchor["href"])
        if "title/tt" in href:
            links.append(href)
    return links
