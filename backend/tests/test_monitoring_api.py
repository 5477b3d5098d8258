"""
Tests for the read-only monitoring API.

Endpoints are exercised through FastAPI's TestClient over a runtime built
from settings; scans are driven directly so that no background thread runs.
"""

import pytest
from fastapi.testclient import TestClient

from filepusher.config import FilePusherSettings
from filepusher.items import ItemStatus
from filepusher.main import build_runtime, create_app
from filepusher.persistence import PersistenceManager
from tests.helpers import make_tree


@pytest.fixture
def runtime(tmp_path, watch_root, clock):
    settings = FilePusherSettings(
        watched_folders=[str(watch_root)],
        file_change_cooldown_seconds=60,
        catalog_db_path=str(tmp_path / "catalog.db"),
    )
    runtime = build_runtime(
        settings,
        persistence_manager=PersistenceManager(db_path=settings.catalog_db_path),
        clock=clock,
    )
    yield runtime
    runtime.shutdown(wait=True)


@pytest.fixture
def client(runtime):
    return TestClient(create_app(runtime))


class TestHealth:

    def test_health(self, client):
        response = client.get("/monitor/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "scheduler_running": False}


class TestItems:

    def test_empty_catalog(self, client):
        response = client.get("/monitor/items")

        assert response.status_code == 200
        assert response.json() == {"items": [], "total_count": 0}

    def test_lists_scanned_items(self, client, runtime, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        runtime.engine.scan_all_folders()
        runtime.checksum_service.shutdown(wait=True)

        data = client.get("/monitor/items").json()

        assert data["total_count"] == 1
        item = data["items"][0]
        assert item["source_path"] == str(watch_root / "show")
        assert item["status"] == "watching"
        assert item["file_count"] == 1
        assert item["total_size"] == 3

    def test_status_filter(self, client, runtime, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        runtime.engine.scan_all_folders()

        assert client.get("/monitor/items", params={"status": "ready_to_send"}).json()[
            "total_count"
        ] == 0
        assert client.get("/monitor/items", params={"status": "watching"}).json()[
            "total_count"
        ] == 1

    def test_invalid_status_filter(self, client):
        response = client.get("/monitor/items", params={"status": "bogus"})

        assert response.status_code == 422

    def test_item_detail(self, client, runtime, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        runtime.engine.scan_all_folders()
        runtime.checksum_service.shutdown(wait=True)
        item = runtime.catalog.list_items(status=ItemStatus.WATCHING)[0]

        response = client.get(f"/monitor/items/{item.id}")

        assert response.status_code == 200
        detail = response.json()
        assert detail["id"] == item.id
        assert detail["files"] == {"a.mkv": 3}
        assert detail["last_checksum"] is not None
        assert detail["checksum_pending"] is False

    def test_unknown_item_is_404(self, client):
        response = client.get("/monitor/items/does-not-exist")

        assert response.status_code == 404


class TestArchives:

    def test_no_jobs(self, client):
        response = client.get("/monitor/archives")

        assert response.status_code == 200
        assert response.json() == {"in_flight": [], "recent": [], "max_workers": 2}

    def test_finished_job_is_listed(self, client, runtime, tmp_path):
        source = make_tree(tmp_path / "manual", {"a.mkv": "abc"})
        runtime.archive_engine.archive_now(source)

        recent = client.get("/monitor/archives").json()["recent"]

        assert len(recent) == 1
        assert recent[0]["source_path"] == str(source)
        assert recent[0]["state"] == "done"
        assert recent[0]["entry_count"] == 1
