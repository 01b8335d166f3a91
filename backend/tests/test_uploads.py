import pytest

from app.services.storage_service import StorageError
from app.services.upload_service import validate_upload


def test_presign_returns_namespaced_key(client, storage, user_id):
    headers = {"x-dev-user-email": "painter@example.com"}
    uid = user_id("painter@example.com")

    resp = client.post("/v1/upload/presign", headers=headers, json={"fileType": "image/webp", "fileSize": 2048})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["expiresIn"] == 300
    assert payload["publicUrl"].startswith(f"https://images.example.test/{uid}/")
    assert payload["publicUrl"].endswith(".webp")

    key = storage.key_from_presigned_url(payload["presignedUrl"])
    assert payload["publicUrl"] == f"https://images.example.test/{key}"
    assert "type=image/webp" in payload["presignedUrl"]
    assert "length=2048" in payload["presignedUrl"]


def test_presign_keys_never_share_a_namespace(client, user_id):
    urls = {}
    for email in ("a@example.com", "b@example.com"):
        resp = client.post(
            "/v1/upload/presign",
            headers={"x-dev-user-email": email},
            json={"fileType": "image/jpeg", "fileSize": 10},
        )
        assert resp.status_code == 200
        urls[email] = resp.json()["publicUrl"]

    assert urls["a@example.com"].startswith(f"https://images.example.test/{user_id('a@example.com')}/")
    assert urls["b@example.com"].startswith(f"https://images.example.test/{user_id('b@example.com')}/")


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"fileType": "image/bmp", "fileSize": 100}, "Invalid file type. Allowed: JPEG, PNG, WebP, GIF"),
        ({"fileType": "application/pdf", "fileSize": 100}, "Invalid file type. Allowed: JPEG, PNG, WebP, GIF"),
        (
            {"fileType": "image/png", "fileSize": 11 * 1024 * 1024},
            "File is too large (11.00 MB). Maximum file size is 10 MB.",
        ),
        ({"fileType": "image/png", "fileSize": 0}, "Invalid file size"),
        ({"fileType": "image/png", "fileSize": -5}, "Invalid file size"),
        ({"fileType": "image/png"}, "fileType and fileSize are required"),
        ({"fileSize": 100}, "fileType and fileSize are required"),
        ({"fileType": "image/png", "fileSize": "100"}, "fileType and fileSize are required"),
        ({"fileType": "image/png", "fileSize": "abc"}, "fileType and fileSize are required"),
        ({"fileType": "image/png", "fileSize": True}, "fileType and fileSize are required"),
        ({"fileType": "image/png", "fileSize": None}, "fileType and fileSize are required"),
        ({"fileType": 7, "fileSize": 100}, "fileType and fileSize are required"),
    ],
)
def test_presign_rejects_invalid_files(client, body, message):
    resp = client.post("/v1/upload/presign", headers={"x-dev-user-email": "x@example.com"}, json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == message


def test_presign_accepts_exactly_ten_megabytes(client):
    resp = client.post(
        "/v1/upload/presign",
        headers={"x-dev-user-email": "x@example.com"},
        json={"fileType": "image/gif", "fileSize": 10 * 1024 * 1024},
    )
    assert resp.status_code == 200


@pytest.mark.parametrize("raw_size", ["NaN", "Infinity", "-Infinity"])
def test_presign_rejects_non_finite_sizes(client, raw_size):
    resp = client.post(
        "/v1/upload/presign",
        headers={"x-dev-user-email": "x@example.com", "content-type": "application/json"},
        content=f'{{"fileType": "image/png", "fileSize": {raw_size}}}',
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid file size"


def test_presign_requires_authentication(client):
    resp = client.post("/v1/upload/presign", json={"fileType": "image/png", "fileSize": 10})
    assert resp.status_code == 401


def test_validate_upload_rejects_before_key_generation(monkeypatch):
    from app.services import upload_service

    def _fail(*args, **kwargs):
        raise AssertionError("key generated for an invalid upload")

    monkeypatch.setattr(upload_service, "build_object_key", _fail)
    with pytest.raises(upload_service.UploadValidationError):
        upload_service.create_presigned_upload(None, "user-1", "image/tiff", 10)
    with pytest.raises(upload_service.UploadValidationError):
        validate_upload("image/png", 50 * 1024 * 1024)


def test_delete_own_upload(client, storage, uploaded_image):
    url = uploaded_image("owner@example.com")
    assert len(storage.objects) == 1

    resp = client.post(
        "/v1/upload/delete",
        headers={"x-dev-user-email": "owner@example.com"},
        json={"imageUrl": url},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert storage.objects == {}


def test_delete_other_users_upload_is_forbidden(client, storage, uploaded_image):
    url = uploaded_image("owner@example.com")

    resp = client.post(
        "/v1/upload/delete",
        headers={"x-dev-user-email": "intruder@example.com"},
        json={"imageUrl": url},
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not authorized to delete this file"
    assert len(storage.objects) == 1


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({}, "imageUrl is required"),
        ({"imageUrl": ""}, "imageUrl is required"),
        ({"imageUrl": "https://elsewhere.example.com/some/key.png"}, "Invalid image URL"),
    ],
)
def test_delete_rejects_bad_urls(client, body, message):
    resp = client.post("/v1/upload/delete", headers={"x-dev-user-email": "x@example.com"}, json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == message


def test_delete_storage_failure_is_generic_500(client, storage, uploaded_image, monkeypatch):
    url = uploaded_image("owner@example.com")

    def _broken(key):
        raise StorageError("bucket unavailable")

    monkeypatch.setattr(storage, "delete_object", _broken)
    resp = client.post(
        "/v1/upload/delete",
        headers={"x-dev-user-email": "owner@example.com"},
        json={"imageUrl": url},
    )
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to delete file"


def test_presign_storage_failure_is_generic_500(client, storage, monkeypatch):
    def _broken(*args, **kwargs):
        raise StorageError("signing failed")

    monkeypatch.setattr(storage, "presign_put", _broken)
    resp = client.post(
        "/v1/upload/presign",
        headers={"x-dev-user-email": "x@example.com"},
        json={"fileType": "image/png", "fileSize": 10},
    )
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to generate upload URL"
