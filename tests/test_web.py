import json

import pytest

from conftest import draft_payload
from reboot.dashboard import SNAPSHOT_CACHE_KEY
from reboot.services import analytics
from reboot.services.clock import DAY_MS, MINUTE_MS, now_ms, to_local
from reboot.services.validation import parse_draft
from web import create_app


@pytest.fixture
def client(store):
    app = create_app(store)
    app.config["TESTING"] = True
    return app.test_client()


class TestWeb:
    def test_health(self, client, store):
        store.save_log(parse_draft(draft_payload()))
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "running", "logs": 1}

    def test_logs_and_range(self, client, store):
        a = store.save_log(parse_draft(draft_payload(timestamp="2026-01-01T10:00")))
        b = store.save_log(parse_draft(draft_payload(timestamp="2026-01-05T10:00")))

        all_logs = client.get("/api/logs").get_json()
        assert [log["id"] for log in all_logs] == [b.id, a.id]

        ranged = client.get(f"/api/logs?start={a.timestamp}&end={a.timestamp}").get_json()
        assert [log["id"] for log in ranged] == [a.id]

    def test_summary_on_empty_store(self, client):
        body = client.get("/api/summary").get_json()
        assert body["stats"]["total_reboots"] == 0
        assert body["health"] == {"score": 50, "focus": 50, "fatigue": 50, "recovery": 50}
        assert body["decision"]["should_alert"] is False
        assert body["decision"]["action"] == "none"

    def test_export_download(self, client, store):
        store.save_log(parse_draft(draft_payload()))
        resp = client.get("/api/export")
        assert resp.status_code == 200
        assert "attachment; filename=reboot-logs-" in resp.headers["Content-Disposition"]
        document = json.loads(resp.data)
        assert document["version"] == "2.0.0"
        assert len(document["logs"]) == 1

    def test_storage_error_maps_to_500(self, client, store, monkeypatch):
        from reboot.errors import StorageReadError

        def broken():
            raise StorageReadError("disk gone")

        monkeypatch.setattr(store, "get_all_logs", broken)
        resp = client.get("/api/logs")
        assert resp.status_code == 500
        assert resp.get_json()["status"] == "error"

    def test_summary_ignores_older_rendered_snapshot(self, client, store):
        when = to_local(now_ms() - 2 * DAY_MS, store.tz).strftime("%Y-%m-%dT%H:%M")
        entry = store.save_log(parse_draft(draft_payload(timestamp=when)))
        rendered_at = entry.timestamp + 10 * MINUTE_MS
        logs = store.get_all_logs()
        store.save_cache(SNAPSHOT_CACHE_KEY, {
            "stats": analytics.calculate_stats(logs, rendered_at, store.tz),
            "insights": analytics.generate_insights(logs, rendered_at, store.tz),
            "health": analytics.get_current_health(logs, rendered_at),
        })

        body = client.get("/api/summary").get_json()
        assert body["health"] == analytics.STALE_HEALTH
        assert client.get("/api/snapshot").get_json()["health"] != analytics.STALE_HEALTH

    def test_snapshot_missing(self, client):
        resp = client.get("/api/snapshot")
        assert resp.status_code == 404
        assert resp.get_json()["status"] == "error"
