import pytest

from imdb_posters.errors import DownloadError
from imdb_posters.images import detect_image_extension, download
from imdb_posters.models import Poster

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class RecordingProgress:
    def __init__(self):
        self.events = []

    def start(self, url):
        self.events.append(("start", url))

    def update(self, url, fraction, bytes_read, total_bytes):
        self.events.append(("update", round(fraction, 2), bytes_read, total_bytes))

    def done(self, url):
        self.events.append(("done", url))


def test_poster_filename():
    poster = Poster(
        movie_url="https://www.imdb.com/title/tt0149460/",
        image_url="https://m.media-amazon.com/images/M/MV5BNz_V1_.jpg",
        index=2,
    )
    assert poster.title_id == "tt0149460"
    assert poster.filename() == "tt0149460-02.jpg"


def test_download_reports_progress(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"abcdefgh", chunks=[b"abcd", b"efgh"])
    progress = RecordingProgress()

    path = download(url, tmp_path / "out", "tt1-00.jpg", session=session, progress=progress)

    assert path == tmp_path / "out" / "tt1-00.jpg"
    assert path.read_bytes() == b"abcdefgh"
    assert progress.events == [
        ("start", url),
        ("update", 0.5, 4, 8),
        ("update", 1.0, 8, 8),
        ("done", url),
    ]


def test_download_without_content_length(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"data", headers={})
    progress = RecordingProgress()
    download(url, tmp_path, "tt1-00.jpg", session=session, progress=progress)
    assert ("update", 0.0, 4, 0) in progress.events


def test_download_guesses_missing_extension(session, tmp_path):
    url = "https://img.example/poster"
    session.add(url, PNG_HEADER)
    path = download(url, tmp_path, "tt1-00", session=session)
    assert path.name == "tt1-00.png"
    assert path.read_bytes() == PNG_HEADER


def test_download_removes_partial_file(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"abcdefgh", chunks=[b"abcd", b"efgh"], fail_after=1)
    progress = RecordingProgress()
    with pytest.raises(DownloadError):
        download(url, tmp_path, "tt1-00.jpg", session=session, progress=progress)
    assert not (tmp_path / "tt1-00.jpg").exists()
    assert ("done", url) not in progress.events


def test_download_short_body_is_an_error(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"abcd", headers={"Content-Length": "10"})
    with pytest.raises(DownloadError, match="incomplete"):
        download(url, tmp_path, "tt1-00.jpg", session=session)
    assert not (tmp_path / "tt1-00.jpg").exists()


def test_download_http_error(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"nope", status_code=403)
    with pytest.raises(DownloadError):
        download(url, tmp_path, "tt1-00.jpg", session=session)


def test_detect_image_extension():
    assert detect_image_extension(PNG_HEADER) == "png"
    assert detect_image_extension(b"\xff\xd8\xff\xe0" + b"\x00" * 16) == "jpg"
    assert detect_image_extension(b"plain text") is None


def test_download_with_non_numeric_content_length(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"data", headers={"Content-Length": "abc"})
    progress = RecordingProgress()
    path = download(url, tmp_path, "tt1-00.jpg", session=session, progress=progress)
    assert path.read_bytes() == b"data"
    assert ("update", 0.0, 4, 0) in progress.events
    assert ("done", url) in progress.events


def test_download_into_existing_directory_only(session, tmp_path):
    url = "https://img.example/poster.jpg"
    session.add(url, b"data")
    missing = tmp_path / "missing"
    with pytest.raises(DownloadError):
        download(url, missing, "tt1-00.jpg", session=session, create_dir=False)
    assert not missing.exists()


def test_poster_filename_from_upper_case_url():
    from imdb_posters.sources import normalize

    movie_url, ok = normalize("https://www.imdb.com/title/TT0149460/")
    assert ok
    poster = Poster(movie_url, "https://img.example/poster.jpg", 1)
    assert poster.filename() == "tt0149460-01.jpg"
