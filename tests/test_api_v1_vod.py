# Tests for the /api/v1 catalog router.
# Created: 2026-10-19

import pytest
from fastapi.testclient import TestClient

from vodcatalog.api.serve import create_app
from vodcatalog.models import DirEntry, FileDetail
from vodcatalog.service import CatalogService


@pytest.fixture
def service(settings, store, executor):
    return CatalogService(settings, store=store, executor=executor)


@pytest.fixture
def client(service):
    with TestClient(create_app(service=service)) as c:
        yield c


class TestCategories:
    def test_one_root_per_site(self, client):
        resp = client.get("/api/v1/vod/categories")
        assert resp.status_code == 200
        data = resp.json()
        assert data["categories"] == [{"type_id": "movies$/", "type_name": "movies"}]
        assert {"label": "名字⬆️", "value": "name,asc"} in data["sort_options"]


class TestBrowse:
    def test_lists_folder(self, client, store):
        store.folders["/TV"] = [
            DirEntry(name="ep2.mp4", size=2048),
            DirEntry(name="ep1.mp4", size=1024),
        ]

        resp = client.get("/api/v1/vod/list", params={"t": "movies$/TV"})

        assert resp.status_code == 200
        data = resp.json()
        names = [e["name"] for e in data["entries"]]
        assert names == ["播放列表", "ep1.mp4", "ep2.mp4"]
        assert data["total"] == 2
        assert data["page_count"] == 1

    def test_unknown_site_is_400(self, client):
        resp = client.get("/api/v1/vod/list", params={"t": "nope$/"})
        assert resp.status_code == 400

    def test_invalid_id_is_400(self, client):
        resp = client.get("/api/v1/vod/list", params={"t": "no-separator"})
        assert resp.status_code == 400

    def test_remote_failure_is_502(self, client):
        resp = client.get("/api/v1/vod/list", params={"t": "movies$/missing"})
        assert resp.status_code == 502

    def test_page_must_be_positive(self, client):
        resp = client.get("/api/v1/vod/list", params={"t": "movies$/", "pg": 0})
        assert resp.status_code == 422


class TestDetail:
    def test_file_detail(self, client, store):
        store.files["/TV/ep1.mp4"] = FileDetail(name="ep1.mp4", provider="Local", raw_url="//cdn/ep1.mp4")

        resp = client.get("/api/v1/vod/detail", params={"ids": "movies$/TV/ep1.mp4"})

        assert resp.status_code == 200
        entry = resp.json()["entries"][0]
        assert entry["play_url"] == "ep1.mp4$http://cdn/ep1.mp4"
        assert entry["play_from"] == "Local"


class TestSearch:
    def test_search(self, client, store):
        store.results["movies"] = [DirEntry(name="Friends.mp4", parent="/TV")]

        resp = client.get("/api/v1/vod/search", params={"wd": "Friends"})

        assert resp.status_code == 200
        assert resp.json()["entries"][0]["id"] == "movies$/TV/Friends.mp4"

    def test_empty_keyword_rejected(self, client):
        assert client.get("/api/v1/vod/search", params={"wd": ""}).status_code == 422


class TestPlay:
    def test_redirects_to_raw_url(self, client, store):
        store.files["/TV/ep1.mp4"] = FileDetail(name="ep1.mp4", raw_url="http://cdn/ep1.mp4")

        resp = client.get(
            "/api/v1/play",
            params={"site": "movies", "path": "/TV/ep1.mp4"},
            follow_redirects=False,
        )

        assert resp.status_code == 307
        assert resp.headers["location"] == "http://cdn/ep1.mp4"

    def test_unknown_site(self, client):
        resp = client.get("/api/v1/play", params={"site": "nope", "path": "/x"}, follow_redirects=False)
        assert resp.status_code == 400
