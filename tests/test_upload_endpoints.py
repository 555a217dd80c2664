"""Tests for image and metadata upload endpoints."""

import json

from fastapi.testclient import TestClient

from borobudur_capture.api.app import create_app
from tests.fakes import InMemoryObjectStore, InMemorySessionLedger


def _metadata(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "photo_id": "p-01",
        "side_flag": "north",
        "bend": 2,
        "timestamp": "2026-10-19T08:00:00Z",
    }
    payload.update(overrides)
    return payload


def test_image_upload_defaults_to_current_session(
    container, ledger: InMemorySessionLedger, object_store: InMemoryObjectStore
) -> None:
    ledger.seed(4)
    client = TestClient(create_app(container))

    response = client.post(
        "/upload/image",
        data={"photo_id": "p-01"},
        files={"file": ("p-01.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["session_id"] == "session_005"
    assert body["path"] == "session_005/images/p-01.jpg"
    assert object_store.objects["session_005/images/p-01.jpg"] == b"jpeg-bytes"
    assert object_store.content_types["session_005/images/p-01.jpg"] == "image/jpeg"


def test_image_upload_honours_explicit_session(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/upload/image",
        data={"photo_id": "p-02", "session_id": "session_002"},
        files={"file": ("p-02.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.status_code == 200
    assert "session_002/images/p-02.jpg" in object_store.objects


def test_image_upload_requires_photo_id_and_file(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    no_file = client.post("/upload/image", data={"photo_id": "p-01"})
    no_id = client.post(
        "/upload/image", files={"file": ("x.jpg", b"jpeg", "image/jpeg")}
    )

    assert no_file.status_code == 400
    assert no_id.status_code == 400
    assert no_file.json()["status"] == "error"
    assert object_store.objects == {}


def test_metadata_upload_keeps_extra_fields(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/upload/meta", json=_metadata(camera="left", tilt=4.5))

    assert response.status_code == 200
    body = response.json()
    assert body["path"] == "session_001/metadata/p-01.json"
    stored = json.loads(object_store.objects["session_001/metadata/p-01.json"])
    assert stored["camera"] == "left"
    assert stored["tilt"] == 4.5
    assert stored["session_id"] == "session_001"
    assert object_store.content_types[body["path"]] == "application/json"


def test_metadata_upload_rejects_missing_fields(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))
    payload = _metadata()
    del payload["bend"]

    missing = client.post("/upload/meta", json=payload)
    blank = client.post("/upload/meta", json=_metadata(side_flag="  "))

    assert missing.status_code == 400
    assert "bend" in missing.json()["message"]
    assert missing.json()["error"] == "MissingFieldError"
    assert blank.status_code == 400
    assert object_store.objects == {}


def test_metadata_upload_rejects_unsafe_session(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/upload/meta", json=_metadata(session_id="../etc"))

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidIdentifierError"
    assert object_store.objects == {}


def test_uploads_reject_photo_ids_that_leave_their_folder(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    for photo_id in ("a/x", "../../session_009/images/evil"):
        image = client.post(
            "/upload/image",
            data={"photo_id": photo_id},
            files={"file": ("x.jpg", b"jpeg", "image/jpeg")},
        )
        meta = client.post("/upload/meta", json=_metadata(photo_id=photo_id))

        assert image.status_code == 400
        assert image.json()["error"] == "InvalidIdentifierError"
        assert meta.status_code == 400
        assert meta.json()["error"] == "InvalidIdentifierError"
    assert object_store.objects == {}


def test_numeric_photo_id_is_stored_as_text(
    container, object_store: InMemoryObjectStore
) -> None:
    client = TestClient(create_app(container))

    meta = client.post("/upload/meta", json=_metadata(photo_id=17))
    image = client.post(
        "/upload/image",
        data={"photo_id": "17"},
        files={"file": ("17.jpg", b"jpeg", "image/jpeg")},
    )

    assert meta.status_code == 200
    assert meta.json()["path"] == "session_001/metadata/17.json"
    assert json.loads(object_store.objects[meta.json()["path"]])["photo_id"] == "17"
    assert image.status_code == 200
    assert image.json()["path"] == "session_001/images/17.jpg"
    status = client.get("/session/status/session_001").json()
    assert status["is_consistent"] is True


def test_uploaded_pair_reconciles(container) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/upload/image",
        data={"photo_id": "p-01"},
        files={"file": ("p-01.jpg", b"jpeg", "image/jpeg")},
    )
    client.post("/upload/meta", json=_metadata())

    status = client.get("/session/status/session_001").json()

    assert status["is_consistent"] is True
    assert status["image_count"] == 1
