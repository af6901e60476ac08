"""Tests for remote function invocation, flyer storage, capabilities and the view endpoints."""
import json
from datetime import date, time
from pathlib import Path
from urllib.parse import urlparse

import httpx
import pytest
from fastapi import HTTPException

from event_admin.config import settings
from event_admin.dependencies import get_functions, get_storage
from event_admin.functions import FunctionInvocationError, FunctionsClient
from event_admin.main import FLYER_MOUNT_PATH, app
from event_admin.permissions import Capabilities
from event_admin.services import event_service
from event_admin.storage import FLYER_BUCKET, LocalObjectStorage, ObjectStorage, StorageError, upload_flyer
from event_admin.store import tables
from tests.conftest import create_test_meeting_category, create_test_participant, seed_company


def _functions(handler) -> FunctionsClient:
    client = httpx.Client(base_url="https://fn.example.test", transport=httpx.MockTransport(handler))
    return FunctionsClient("https://fn.example.test", api_key="secret", client=client)


class TestFunctionsClient:
    def test_invoke_posts_json(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"sent": 2})

        assert _functions(handler).invoke("notify-event-attendees", {"eventId": "e1"}) == {"sent": 2}
        assert seen == {"path": "/notify-event-attendees", "body": {"eventId": "e1"}, "auth": "Bearer secret"}

    def test_error_response_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "smtp down"})

        with pytest.raises(FunctionInvocationError, match="smtp down") as exc:
            _functions(handler).invoke("notify-event-attendees", {})
        assert exc.value.status_code == 500


class TestSendInvitations:
    def _event_with_invitee(self, store):
        store.insert(tables.EVENTS, [{"id": "e1", "subject": "Gala", "organizer_kind": "category",
                                      "date": date(2024, 3, 1),
                                      "start_time": time(18)}])
        store.insert(tables.PARTICIPANTS, [{"id": "p1", "name": "Ana"}])
        store.insert(tables.INVITEES, [{"event_id": "e1", "participant_id": "p1"}])

    def test_no_invitees_is_400(self, store):
        functions = _functions(lambda request: httpx.Response(200, json={}))
        with pytest.raises(HTTPException) as exc:
            event_service.send_invitations(store, functions, "e1")
        assert exc.value.status_code == 400

    def test_success_returns_count(self, store):
        self._event_with_invitee(store)
        functions = _functions(lambda request: httpx.Response(200, json={}))
        assert event_service.send_invitations(store, functions, "e1") == 1

    def test_function_failure_is_502(self, store):
        self._event_with_invitee(store)
        functions = _functions(lambda request: httpx.Response(500, json={"error": "smtp down"}))
        with pytest.raises(HTTPException) as exc:
            event_service.send_invitations(store, functions, "e1")
        assert exc.value.status_code == 502

    def test_invitations_endpoint(self, client):
        finance = create_test_meeting_category(client)
        ana = create_test_participant(client, "Ana")
        event = client.post("/api/events/", json={
            "event": {"subject": "Gala", "date": "2024-03-01", "start_time": "18:00:00"},
            "organizer_ids": [finance["id"]],
            "invitee_ids": [ana["id"]],
        }).json()[0]

        app.dependency_overrides[get_functions] = lambda: _functions(lambda request: httpx.Response(200, json={}))
        resp = client.post(f"/api/events/{event['id']}/invitations")
        assert resp.status_code == 200
        assert resp.json() == {"event_id": event["id"], "sent": 1}


class BrokenStorage(ObjectStorage):
    def upload(self, name, data, upsert=False):
        raise StorageError("bucket unavailable")

    def public_url(self, handle):
        raise AssertionError("not reached")


class TestFlyers:
    def test_upload_returns_public_url(self, tmp_path):
        storage = LocalObjectStorage(str(tmp_path), "http://files.test/")
        url = upload_flyer(storage, "poster.png", b"png")
        name = url.rsplit("/", 1)[1]
        assert url.startswith("http://files.test/event_flyers/")
        assert name.endswith("_poster.png")
        assert (tmp_path / "event_flyers" / name).read_bytes() == b"png"

    def test_failure_returns_none(self):
        assert upload_flyer(BrokenStorage(), "poster.png", b"png") is None

    def test_existing_object_is_not_overwritten(self, tmp_path):
        storage = LocalObjectStorage(str(tmp_path), "http://files.test")
        storage.upload("a.png", b"1")
        with pytest.raises(StorageError):
            storage.upload("a.png", b"2")
        storage.upload("a.png", b"2", upsert=True)
        assert (tmp_path / "event_flyers" / "a.png").read_bytes() == b"2"

    def test_flyer_endpoint(self, client, tmp_path):
        app.dependency_overrides[get_storage] = lambda: LocalObjectStorage(str(tmp_path), "http://files.test")
        resp = client.post("/api/flyers", params={"filename": "poster.png"}, content=b"png")
        assert resp.status_code == 200
        assert resp.json()["flyer_url"].endswith("_poster.png")

    def test_flyer_endpoint_failure_is_null(self, client):
        app.dependency_overrides[get_storage] = lambda: BrokenStorage()
        resp = client.post("/api/flyers", params={"filename": "poster.png"}, content=b"png")
        assert resp.json() == {"flyer_url": None}

    def test_uploaded_flyer_is_served_at_its_public_url(self, client):
        resp = client.post("/api/flyers", params={"filename": "served.png"}, content=b"png-bytes")
        url = resp.json()["flyer_url"]
        stored = Path(settings.FLYER_STORAGE_DIR) / FLYER_BUCKET / url.rsplit("/", 1)[1]
        try:
            fetched = client.get(urlparse(url).path)
            assert fetched.status_code == 200
            assert fetched.content == b"png-bytes"
        finally:
            stored.unlink(missing_ok=True)

    def test_missing_flyer_is_not_found(self, client):
        assert client.get(FLYER_MOUNT_PATH.rstrip("/") + f"/{FLYER_BUCKET}/nope.png").status_code == 404


class TestCompaniesEndpoint:
    def test_list_sorted_by_name(self, client, store):
        seed_company(store, "Zeta Plásticos")
        seed_company(store, "Acme Industrial")
        resp = client.get("/api/companies/")
        assert resp.status_code == 200
        assert [c["name"] for c in resp.json()] == ["Acme Industrial", "Zeta Plásticos"]

    def test_search_returns_suggestions(self, client, store):
        seed_company(store, "Zeta Plásticos")
        seed_company(store, "Acme Industrial")
        assert [c["name"] for c in client.get("/api/companies/", params={"search": "plasticos"}).json()] == [
            "Zeta Plásticos"
        ]
        assert client.get("/api/companies/", params={"search": "ze"}).json() == []


class TestCapabilities:
    def test_parse_header(self):
        caps = Capabilities.from_header("create:Event, update:Commission")
        assert caps.can("create", "event")
        assert caps.can("UPDATE", "Commission")
        assert not caps.can("delete", "Event")

    def test_super_admin(self):
        assert Capabilities.from_header("*").can("delete", "Commission")

    def test_empty(self):
        assert not Capabilities.from_header(None).can("create", "Event")


class TestViewEndpoints:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_events_view(self, client):
        finance = create_test_meeting_category(client, "Finance")
        client.post("/api/events/", json={
            "event": {"subject": "Budget", "date": "2024-01-10", "start_time": "09:00:00"},
            "organizer_ids": [finance["id"]],
        })
        resp = client.get("/api/views/events", headers={"X-Permissions": "create:Event"}, params={
            "start_year": 2023, "organizer_type": "meeting_category", "organizer_id": finance["id"],
        })
        assert resp.status_code == 200
        view = resp.json()
        assert view["period_label"] == "2023-2024"
        assert view["sidebar_meeting_categories"] == [{"id": finance["id"], "name": "Finance", "count": 1}]
        assert [card["organizer_name"] for card in view["events"]] == ["Finance"]
        assert view["affordances"] == {"create": True, "update": False, "delete": False}

    def test_committees_view(self, client):
        finance = create_test_meeting_category(client, "Finance")
        create_test_participant(client, "Ana", meeting_category_ids=[finance["id"]])
        view = client.get("/api/views/committees", headers={"X-Permissions": "*"}).json()
        assert view["categories"][0]["participants_count"] == 1
        assert view["affordances"]["delete"] is True
