"""Tests for image/metadata reconciliation."""

import asyncio

from borobudur_capture.services.artifacts import ArtifactRouter
from borobudur_capture.services.reconciliation import ConsistencyReconciler
from tests.fakes import InMemoryObjectStore


def _reconciler(store: InMemoryObjectStore) -> ConsistencyReconciler:
    return ConsistencyReconciler(ArtifactRouter(store))


def test_reports_missing_counterparts_in_listing_order() -> None:
    store = InMemoryObjectStore()
    for item in ("c", "a", "b"):
        store.objects[f"session_002/images/{item}.jpg"] = b"img"
    for item in ("d", "b", "c"):
        store.objects[f"session_002/metadata/{item}.json"] = b"{}"

    report = asyncio.run(_reconciler(store).check_session("session_002"))

    assert report.missing_metadata == ["a"]
    assert report.missing_images == ["d"]
    assert report.is_consistent is False
    assert report.image_count == 3
    assert report.metadata_count == 3


def test_missing_lists_keep_store_order() -> None:
    store = InMemoryObjectStore()
    for item in ("z", "m", "a"):
        store.objects[f"session_002/images/{item}.jpg"] = b"img"

    report = asyncio.run(_reconciler(store).check_session("session_002"))

    assert report.missing_metadata == ["z", "m", "a"]


def test_empty_session_is_consistent() -> None:
    reconciler = _reconciler(InMemoryObjectStore())
    report = asyncio.run(reconciler.check_session("session_009"))

    assert report.is_consistent is True
    assert report.missing_metadata == []
    assert report.missing_images == []
    assert report.image_count == 0


def test_extension_variants_match_metadata() -> None:
    store = InMemoryObjectStore()
    store.objects["session_001/images/a.JPG"] = b"img"
    store.objects["session_001/images/b.jpeg"] = b"img"
    store.objects["session_001/metadata/a.json"] = b"{}"
    store.objects["session_001/metadata/b.json"] = b"{}"

    report = asyncio.run(_reconciler(store).check_session("session_001"))

    assert report.is_consistent is True
    assert report.image_ids == ["a", "b"]


def test_other_sessions_are_ignored() -> None:
    store = InMemoryObjectStore()
    store.objects["session_001/images/a.jpg"] = b"img"
    store.objects["session_002/metadata/a.json"] = b"{}"

    report = asyncio.run(_reconciler(store).check_session("session_001"))

    assert report.missing_metadata == ["a"]
    assert report.missing_images == []
