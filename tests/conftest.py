"""Shared pytest fixtures and fakes for all tests."""

import asyncio

import pytest

from common.geolocation import GeolocationError
from common.session import SessionContext


def make_consultation(consultation_id: str, name: str = "Plan", mode: str = "skin", created_at: str | None = None) -> dict:
    """Build a SavedConsultation with a deterministic timestamp."""
    return {
        "id": consultation_id,
        "name": name,
        "mode": mode,
        "payload": {"answers": {"skin_type": "oily"}, "notes": f"plan {consultation_id}"},
        "created_at": created_at or "2025-01-01T00:00:00",
    }


class FakeStore:
    """In-memory stand-in for the durable consultation store."""

    def __init__(self):
        self.rows: dict[str, dict] = {}
        self.fail_init = False
        self.fail_write = False
        self.fail_list = False
        self.fail_delete = False
        self.list_calls = 0

    async def init(self) -> None:
        if self.fail_init:
            raise RuntimeError("IndexedDB unavailable")

    async def write(self, record: dict) -> None:
        if self.fail_write:
            raise RuntimeError("disk full")
        self.rows[record["id"]] = dict(record)

    async def list_all(self) -> list[dict]:
        self.list_calls += 1
        if self.fail_list:
            raise RuntimeError("read failed")
        return sorted((dict(r) for r in self.rows.values()), key=lambda r: (r["created_at"], r["id"]))

    async def delete(self, consultation_id: str) -> None:
        if self.fail_delete:
            raise RuntimeError("delete failed")
        self.rows.pop(consultation_id, None)


class FakeAI:
    """Scriptable AI capabilities; each call can be delayed or made to fail."""

    def __init__(self):
        self.provider_calls: list[tuple] = []
        self.search_calls: list[tuple] = []
        self.content_calls: list[tuple] = []
        self.providers: list[dict] = [{"name": "Glow Clinic", "address": "1 Palm St"}]
        self.search_results: list[dict] = [
            {"title": "Skin Consultation", "description": "Personal skincare plan", "target_page": "skin_consultation"}
        ]
        self.content = "# Summer skin\nStay hydrated."
        self.tokens: list[str] = ["Drink ", "more ", "water."]
        self.error: object = None

    async def provider_lookup(self, query, category, coordinate, locale):
        self.provider_calls.append((query, category, coordinate, locale))
        if self.error is not None:
            raise self.error
        return list(self.providers)

    async def semantic_search(self, query, corpus, locale):
        self.search_calls.append((query, corpus, locale))
        if self.error is not None:
            raise self.error
        return list(self.search_results)

    async def generate_content(self, topic, content_type, tone, locale):
        self.content_calls.append((topic, content_type, tone, locale))
        if self.error is not None:
            raise self.error
        return self.content

    async def stream_chat(self, history):
        for token in self.tokens:
            await asyncio.sleep(0)
            yield token
        if self.error is not None:
            raise self.error


class FakeGeolocator:
    """Geolocator returning a fixed coordinate, an error, or hanging forever."""

    def __init__(self, coordinate=None, error: Exception | None = None, hang: bool = False):
        self.coordinate = coordinate or {"lat": 25.2048, "lon": 55.2708}
        self.error = error
        self.hang = hang
        self.calls = 0

    async def get_current_position(self):
        self.calls += 1
        if self.hang:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return dict(self.coordinate)


@pytest.fixture
def session() -> SessionContext:
    return SessionContext()


@pytest.fixture
def fake_ai() -> FakeAI:
    return FakeAI()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def denied_geolocator() -> FakeGeolocator:
    return FakeGeolocator(error=GeolocationError(1, "User denied Geolocation"))
