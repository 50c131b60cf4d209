# Tests for the index file cache.
# Created: 2026-10-19

import io
import zipfile

import httpx
import pytest

from vodcatalog.config import Site
from vodcatalog.errors import CorruptArchive, IndexUnavailable
from vodcatalog.index_cache import IndexCache, index_file_name, is_remote, safe_extract


def _zip_bytes(files: dict[str, str], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, text in files.items():
            zf.writestr(name, text)
    return buf.getvalue()


def _corrupt_zip(text: str) -> bytes:
    """A stored zip whose member data no longer matches its CRC."""
    data = bytearray(_zip_bytes({"index.txt": text}, compression=zipfile.ZIP_STORED))
    offset = data.find(text.encode())
    data[offset] ^= 0x01
    return bytes(data)


def _client(routes: dict[str, bytes], calls: list[str]) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        body = routes.get(str(request.url))
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, content=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestHelpers:
    def test_is_remote(self):
        assert is_remote("http://x/index.txt")
        assert is_remote("https://x/index.txt")
        assert not is_remote("/data/index.txt")

    def test_index_file_name(self):
        assert index_file_name("http://x/a/index.zip") == "index.zip"
        assert index_file_name("http://x/a/") == "index.txt"
        assert index_file_name("index") == "index.txt"


class TestResolve:
    def test_local_path_returned_unchanged(self, tmp_path):
        cache = IndexCache(tmp_path / "cache", client=_client({}, []))
        assert str(cache.resolve("movies", "/srv/index.txt")) == "/srv/index.txt"

    def test_downloads_text_once(self, tmp_path):
        calls = []
        url = "http://host/data/index.txt"
        cache = IndexCache(tmp_path / "cache", client=_client({url: b"a/b.mp4\n"}, calls))

        first = cache.resolve("movies", url)
        second = cache.resolve("movies", url)

        assert first == second
        assert first == (tmp_path / "cache" / "movies" / "index.txt").absolute()
        assert first.read_text() == "a/b.mp4\n"
        assert calls == [url]

    def test_zip_is_extracted_and_removed(self, tmp_path):
        calls = []
        url = "http://host/index.zip"
        body = _zip_bytes({"index.txt": "TV/Show/ep1.mp4\n"})
        cache = IndexCache(tmp_path / "cache", client=_client({url: body}, calls))

        path = cache.resolve("movies", url)

        assert path.name == "index.txt"
        assert path.read_text() == "TV/Show/ep1.mp4\n"
        assert not (tmp_path / "cache" / "movies" / "index.zip").exists()

        cache.resolve("movies", url)
        assert calls == [url]

    def test_zip_without_expected_text(self, tmp_path):
        url = "http://host/index.zip"
        body = _zip_bytes({"other.txt": "x"})
        cache = IndexCache(tmp_path / "cache", client=_client({url: body}, []))

        with pytest.raises(CorruptArchive):
            cache.resolve("movies", url)

    def test_bad_zip(self, tmp_path):
        url = "http://host/index.zip"
        cache = IndexCache(tmp_path / "cache", client=_client({url: b"not a zip"}, []))

        with pytest.raises(CorruptArchive):
            cache.resolve("movies", url)
        assert not (tmp_path / "cache" / "movies" / "index.zip").exists()

    def test_crc_failure_leaves_no_cache_file(self, tmp_path):
        calls = []
        url = "http://host/index.zip"
        site_dir = tmp_path / "cache" / "movies"
        cache = IndexCache(tmp_path / "cache", client=_client({url: _corrupt_zip("TV/Show/ep1.mp4\n")}, calls))

        with pytest.raises(CorruptArchive):
            cache.resolve("movies", url)

        assert not (site_dir / "index.txt").exists()
        assert list(site_dir.iterdir()) == []

        with pytest.raises(CorruptArchive):
            cache.resolve("movies", url)
        assert calls == [url, url]

    def test_retry_after_failed_extraction(self, tmp_path):
        calls = []
        url = "http://host/index.zip"
        routes = {url: _corrupt_zip("TV/Show/ep1.mp4\n")}
        cache = IndexCache(tmp_path / "cache", client=_client(routes, calls))

        with pytest.raises(CorruptArchive):
            cache.resolve("movies", url)

        routes[url] = _zip_bytes({"index.txt": "TV/Show/ep1.mp4\n"})
        path = cache.resolve("movies", url)

        assert path.read_text() == "TV/Show/ep1.mp4\n"
        assert len(calls) == 2

    def test_zip_entries_escaping_cache_are_skipped(self, tmp_path):
        url = "http://host/index.zip"
        body = _zip_bytes({"../../escape.txt": "bad", "../sibling.txt": "bad", "index.txt": "ok\n"})
        cache = IndexCache(tmp_path / "cache", client=_client({url: body}, []))

        path = cache.resolve("movies", url)

        assert path.read_text() == "ok\n"
        assert not (tmp_path / "escape.txt").exists()
        assert not (tmp_path / "cache" / "escape.txt").exists()
        assert not (tmp_path / "cache" / "movies" / "sibling.txt").exists()
        assert sorted(p.name for p in (tmp_path / "cache" / "movies").iterdir()) == ["index.txt"]

    def test_http_error_is_index_unavailable(self, tmp_path):
        cache = IndexCache(tmp_path / "cache", client=_client({}, []))

        with pytest.raises(IndexUnavailable):
            cache.resolve("movies", "http://host/missing.txt")
        assert not (tmp_path / "cache" / "movies" / "missing.txt").exists()

    def test_sites_are_cached_separately(self, tmp_path):
        calls = []
        url = "http://host/index.txt"
        cache = IndexCache(tmp_path / "cache", client=_client({url: b"x\n"}, calls))

        a = cache.resolve("a", url)
        b = cache.resolve("b", url)

        assert a != b
        assert len(calls) == 2


class TestSafeExtract:
    def test_skips_entries_escaping_destination(self, tmp_path):
        archive = tmp_path / "evil.zip"
        archive.write_bytes(_zip_bytes({"../escape.txt": "bad", "ok/index.txt": "good"}))
        dest = tmp_path / "dest"
        dest.mkdir()

        extracted = safe_extract(archive, dest)

        assert [p.name for p in extracted] == ["index.txt"]
        assert (dest / "ok" / "index.txt").read_text() == "good"
        assert not (tmp_path / "escape.txt").exists()


class TestWarm:
    def test_warm_logs_and_continues(self, tmp_path):
        calls = []
        good = "http://host/good.txt"
        cache = IndexCache(tmp_path / "cache", client=_client({good: b"x\n"}, calls))
        sites = [
            Site(name="bad", url="http://a", index_file="http://host/missing.txt"),
            Site(name="good", url="http://b", index_file=good),
            Site(name="api", url="http://c"),
            Site(name="off", url="http://d", searchable=False, index_file=good),
        ]

        cache.warm(sites)

        assert (tmp_path / "cache" / "good" / "good.txt").exists()
        assert calls == ["http://host/missing.txt", good]
