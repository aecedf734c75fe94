"""스토리지 이벤트 기반 파생 이미지 생성 파이프라인을 검증합니다."""

import asyncio
import io

import pytest
from PIL import Image

from app.schemas.storage import StorageEvent
from app.services.derivative_pipeline import DerivativePipeline, PipelineState, render_derivative
from app.services.derivative_store import DerivativeStore
from app.services.object_store import ObjectNotFound


def _size_of(data: bytes):
    with Image.open(io.BytesIO(data)) as img:
        return img.size, img.format


def _run(pipeline, key, content_type="image/png"):
    return asyncio.run(pipeline.process_event(StorageEvent(key=key, content_type=content_type)))


def test_editor_upload_produces_all_sizes(store, put_object, make_png):
    put_object("images/editor/1700-cat.png", make_png(1600, 900))

    run = _run(DerivativePipeline(store), "images/editor/1700-cat.png")

    assert run.state == PipelineState.COMPLETED
    assert run.failed == []
    expected = {"thumbnail": 300, "medium": 800, "large": 1200}
    for size, width in expected.items():
        data = asyncio.run(store.get(f"images/editor/{size}/1700-cat.png"))
        (w, h), fmt = _size_of(data)
        assert fmt == "WEBP"
        assert w == width
        assert h == round(900 * width / 1600)


def test_small_images_are_not_upscaled(store, put_object, make_png):
    put_object("images/editor/1700-icon.png", make_png(500, 250))

    run = _run(DerivativePipeline(store), "images/editor/1700-icon.png")

    widths = {r.size: r.width for r in run.results}
    assert widths == {"thumbnail": 300, "medium": 500, "large": 500}
    (w, h), _ = _size_of(asyncio.run(store.get("images/editor/large/1700-icon.png")))
    assert (w, h) == (500, 250)


def test_redelivery_is_idempotent(store, put_object, make_png):
    put_object("images/editor/1700-cat.png", make_png(1024, 768))
    pipeline = DerivativePipeline(store)

    _run(pipeline, "images/editor/1700-cat.png")
    first = {size: asyncio.run(store.get(f"images/editor/{size}/1700-cat.png")) for size in ("thumbnail", "medium", "large")}
    second_run = _run(pipeline, "images/editor/1700-cat.png")
    second = {size: asyncio.run(store.get(f"images/editor/{size}/1700-cat.png")) for size in ("thumbnail", "medium", "large")}

    assert second_run.state == PipelineState.COMPLETED
    assert second_run.failed == []
    assert first == second


def test_derivative_keys_are_rejected(store, put_object, make_png):
    put_object("images/editor/thumbnail/1700-cat.png", make_png(300, 200))

    run = _run(DerivativePipeline(store), "images/editor/thumbnail/1700-cat.png", content_type="image/webp")

    assert run.state == PipelineState.REJECTED
    assert asyncio.run(store.list("images/editor/thumbnail/thumbnail/")) == []


def test_non_image_content_is_rejected(store, put_object):
    put_object("images/editor/1700-doc.pdf", b"%PDF-1.4")

    assert _run(DerivativePipeline(store), "images/editor/1700-doc.pdf", "application/pdf").state == PipelineState.REJECTED
    assert _run(DerivativePipeline(store), "images/editor/1700-doc.pdf", None).state == PipelineState.REJECTED


def test_original_namespace_is_not_processed(store, put_object, make_png):
    put_object("images/original/1700-cover.png", make_png(2000, 1000))

    run = _run(DerivativePipeline(store), "images/original/1700-cover.png")

    assert run.state == PipelineState.COMPLETED
    assert run.results == []
    assert asyncio.run(store.list("images/original/")) == ["images/original/1700-cover.png"]


def test_unrelated_keys_are_rejected(store):
    assert _run(DerivativePipeline(store), "files/report.png").state == PipelineState.REJECTED
    assert _run(DerivativePipeline(store), "images/editor/nested/dir/x.png").state == PipelineState.REJECTED


def test_download_failure_aborts_run(store):
    run = _run(DerivativePipeline(store), "images/editor/1700-gone.png")

    assert run.state == PipelineState.ABORTED
    assert run.results == []
    assert asyncio.run(store.list("images/")) == []


def test_one_size_failure_does_not_block_others(store, put_object, make_png, monkeypatch):
    put_object("images/editor/1700-cat.png", make_png(1600, 900))
    derivatives = DerivativeStore(store)
    original_write = derivatives.write_derivative

    async def _write(base_file_name, size, data, content_type, namespace="editor"):
        if size == "medium":
            raise OSError("disk full")
        return await original_write(base_file_name, size, data, content_type, namespace=namespace)

    monkeypatch.setattr(derivatives, "write_derivative", _write)
    run = _run(DerivativePipeline(store, derivatives), "images/editor/1700-cat.png")

    assert run.state == PipelineState.COMPLETED
    assert run.failed == ["medium"]
    assert sorted(run.generated) == [
        "images/editor/large/1700-cat.png",
        "images/editor/thumbnail/1700-cat.png",
    ]
    with pytest.raises(ObjectNotFound):
        asyncio.run(store.get("images/editor/medium/1700-cat.png"))


def test_corrupt_image_fails_every_size_without_raising(store, put_object):
    put_object("images/editor/1700-broken.png", b"not really a png")

    run = _run(DerivativePipeline(store), "images/editor/1700-broken.png")

    assert run.state == PipelineState.COMPLETED
    assert run.failed == ["thumbnail", "medium", "large"]


def test_render_derivative_converts_palette_images():
    buf = io.BytesIO()
    Image.new("P", (400, 200)).save(buf, format="GIF")
    data, w, h = render_derivative(buf.getvalue(), 300)
    assert (w, h) == (300, 150)
    assert _size_of(data) == ((300, 150), "WEBP")


def test_backfill_completes_partial_sets(store, put_object, make_png):
    put_object("images/editor/1700-a.png", make_png(900, 600))
    put_object("images/editor/1700-b.png", make_png(900, 600))
    pipeline = DerivativePipeline(store)
    _run(pipeline, "images/editor/1700-a.png")
    asyncio.run(store.delete("images/editor/large/1700-a.png"))

    runs = asyncio.run(pipeline.backfill())

    assert sorted(run.key for run in runs) == ["images/editor/1700-a.png", "images/editor/1700-b.png"]
    assert asyncio.run(DerivativeStore(store).missing_sizes("1700-a.png")) == []
    assert asyncio.run(DerivativeStore(store).missing_sizes("1700-b.png")) == []
