from __future__ import annotations

import threading
from typing import Dict, List, Optional

import pytest
import requests


class FakeResponse:
    def __init__(
        self,
        url: str,
        body: bytes = b"",
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        chunks: Optional[List[bytes]] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self.url = url
        self.content = body
        self.status_code = status_code
        self.headers = headers if headers is not None else {"Content-Length": str(len(body))}
        self._chunks = chunks
        self._fail_after = fail_after

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}")

    def iter_content(self, chunk_size: int = 1):
        chunks = self._chunks
        if chunks is None:
            chunks = [
                self.content[i : i + chunk_size]
                for i in range(0, len(self.content), chunk_size)
            ]
        for position, chunk in enumerate(chunks):
            if self._fail_after is not None and position >= self._fail_after:
                raise requests.ConnectionError("connection dropped")
            yield chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


class FakeSession:
    """Serves canned responses by URL; unknown URLs fail like a dead host."""

    def __init__(self, pages: Optional[Dict[str, object]] = None) -> None:
        self.pages: Dict[str, object] = dict(pages or {})
        self.requested: List[str] = []
        self.headers: Dict[str, str] = {}
        self._lock = threading.Lock()

    def add(self, url: str, body, **kwargs) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.pages[url] = FakeResponse(url, body, **kwargs)

    def get(self, url: str, **kwargs) -> FakeResponse:
        with self._lock:
            self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise requests.ConnectionError(f"no route to {url}")
        return page


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


def movie_page(title_id: str, media_id: str, title: str = "A Movie") -> str:
    return f"""
    <html><body>
      <div class="title_wrapper"><h1>{title}&nbsp;</h1></div>
      <div class="poster">
        <a href="/title/{title_id}/mediaviewer/{media_id}?ref_=tt_ov_i">
          <img src="thumb.jpg">
        </a>
      </div>
    </body></html>
    """


def media_viewer_page(media_id: str, count: int = 1, srcset: str = "") -> str:
    images = "".join(
        f'<div class="pswp__zoom-wrap"><img src="https://img.example/{media_id}-{n}.jpg"'
        f' data-image-id="{media_id}-curr" srcset="{srcset}"></div>'
        for n in range(count)
    )
    return f"""
    <html><body>
      {images}
      <div class="thumbs"><img src="https://img.example/other.jpg" data-image-id="rm999-curr"></div>
    </body></html>
    """


@pytest.fixture
def imdb_site(session: FakeSession) -> FakeSession:
    """Two working movies and one whose media viewer carries no poster."""
    base = "https://www.imdb.com"
    session.add(f"{base}/title/tt2861424/", movie_page("tt2861424", "rm1111", "Rick and Morty"))
    session.add(f"{base}/title/tt2861424/mediaviewer/rm1111", media_viewer_page("rm1111"))
    session.add(f"{base}/title/tt0149460/", movie_page("tt0149460", "rm2222", "Futurama"))
    session.add(
        f"{base}/title/tt0149460/mediaviewer/rm2222",
        media_viewer_page("rm2222", srcset="https://img.example/a.jpg 100w, https://img.example/b.jpg 200w"),
    )
    session.add(f"{base}/title/tt0000003/", movie_page("tt0000003", "rm3333", "Empty"))
    session.add(f"{base}/title/tt0000003/mediaviewer/rm3333", "<html><body></body></html>")
    return session
