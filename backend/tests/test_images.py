"""이미지 업로드, 스토리지 이벤트 수신, 고아 이미지 정리 API를 검증합니다."""

import asyncio

from app.models.faq import Faq
from app.services.object_store import public_url
from app.utils.content_images import resolve_base_file_name
from app.utils.helpers import build_base_file_name, sanitize_file_name


def test_base_file_name_is_timestamped_and_sanitized():
    assert sanitize_file_name("내 사진 (1).png") == "______1_.png"
    assert build_base_file_name("cat photo.png", now_ms=1700) == "1700-cat_photo.png"


def test_upload_editor_image_generates_derivatives(client, store, make_png):
    files = {"file": ("cat.png", make_png(1600, 1200), "image/png")}

    resp = client.post("/api/images/upload", files=files, data={"target": "editor"})

    assert resp.status_code == 200, resp.text
    data = resp.json()
    base = data["fileName"]
    assert base.endswith("-cat.png")
    assert data["path"] == f"images/editor/{base}"
    assert data["publicUrl"] == public_url(data["path"])
    assert resolve_base_file_name(data["publicUrl"]) == base
    # 백그라운드 작업은 TestClient 응답 전에 끝난다
    keys = asyncio.run(store.list("images/editor/"))
    assert keys == sorted(
        [
            f"images/editor/{base}",
            f"images/editor/large/{base}",
            f"images/editor/medium/{base}",
            f"images/editor/thumbnail/{base}",
        ]
    )


def test_upload_featured_image_is_stored_without_derivatives(client, store, make_png):
    files = {"file": ("cover.png", make_png(400, 300), "image/png")}

    resp = client.post("/api/images/upload", files=files, data={"target": "featuredImage"})

    assert resp.status_code == 200
    assert resp.json()["path"].startswith("images/original/")
    assert len(asyncio.run(store.list("images/"))) == 1


def test_upload_rejects_non_images_and_unknown_targets(client, store):
    pdf = {"file": ("doc.pdf", b"%PDF-1.4", "application/pdf")}
    assert client.post("/api/images/upload", files=pdf).status_code == 400

    png = {"file": ("a.png", b"\x89PNG\r\n\x1a\n", "image/png")}
    assert client.post("/api/images/upload", files=png, data={"target": "unknown"}).status_code == 400
    assert asyncio.run(store.list("images/")) == []


def test_upload_rejects_oversized_files(client, store, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "MAX_IMAGE_UPLOAD_SIZE", 4)
    files = {"file": ("a.png", b"\x89PNG\r\n\x1a\n", "image/png")}
    assert client.post("/api/images/upload", files=files).status_code == 400


def test_storage_event_endpoint_runs_pipeline(client, store, put_object, make_png):
    put_object("images/editor/1700-cat.png", make_png(800, 600))

    resp = client.post("/api/storage/events", json={"name": "images/editor/1700-cat.png", "contentType": "image/png"})

    assert resp.status_code == 202
    assert resp.json() == {"accepted": True, "key": "images/editor/1700-cat.png"}
    assert asyncio.run(store.exists("images/editor/thumbnail/1700-cat.png"))
    assert asyncio.run(store.exists("images/editor/large/1700-cat.png"))


def test_storage_event_for_derivative_is_ignored(client, store, put_object, make_png):
    put_object("images/editor/medium/1700-cat.png", make_png(800, 600))

    resp = client.post("/api/storage/events", json={"key": "images/editor/medium/1700-cat.png", "content_type": "image/webp"})

    assert resp.status_code == 202
    assert asyncio.run(store.list("images/")) == ["images/editor/medium/1700-cat.png"]


def test_cleanup_orphan_images_dry_run_and_apply(client, db, store, put_object):
    for key in (
        "images/editor/1700-used.png",
        "images/editor/thumbnail/1700-used.png",
        "images/editor/1700-orphan.png",
        "images/editor/large/1700-orphan.png",
        "images/original/1700-cover.jpg",
    ):
        put_object(key)
    db.add(
        Faq(
            question={"ko": "질문"},
            answer={"ko": f'<img src="{public_url("images/editor/thumbnail/1700-used.png")}">'},
        )
    )
    db.commit()

    dry = client.post("/api/images/cleanup?dry_run=true")
    assert dry.status_code == 200
    assert dry.json()["orphan_base_names"] == ["1700-cover.jpg", "1700-orphan.png"]
    assert dry.json()["deleted_count"] == 0
    assert len(asyncio.run(store.list("images/"))) == 5

    applied = client.post("/api/images/cleanup?dry_run=false").json()
    assert applied["referenced_count"] == 1
    assert applied["existing_count"] == 3
    assert applied["deleted_count"] == 2
    assert asyncio.run(store.list("images/")) == [
        "images/editor/1700-used.png",
        "images/editor/thumbnail/1700-used.png",
    ]
