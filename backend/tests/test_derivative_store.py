"""원본/파생 이미지 묶음 삭제와 파생 이미지 쓰기를 검증합니다."""

import asyncio
import logging

from app.services.derivative_store import (
    DELETED,
    FAILED,
    NOT_FOUND,
    DerivativeStore,
    is_derivative_key,
    variant_keys,
)
from app.services.object_store import ObjectStoreError


class _FlakyStore:
    def __init__(self, inner, broken_key):
        self.inner = inner
        self.broken_key = broken_key

    async def delete(self, key):
        if key == self.broken_key:
            raise ObjectStoreError("storage unavailable")
        await self.inner.delete(key)


class _StuckStore:
    async def delete(self, key):
        await asyncio.sleep(5)


def test_variant_keys_cover_namespaces_sizes_and_legacy_layout():
    keys = variant_keys("1700-cat.png")
    assert "images/editor/1700-cat.png" in keys
    assert "images/editor/thumbnail/1700-cat.png" in keys
    assert "images/editor/original/1700-cat.png" in keys
    assert "images/original/large/1700-cat.png" in keys
    assert "images/medium/1700-cat.png" in keys
    assert len(keys) == len(set(keys))

    scoped = variant_keys("1700-cat.png", namespace="editor")
    assert not any(k.startswith("images/original/large/") for k in scoped)
    assert "images/large/1700-cat.png" in scoped


def test_is_derivative_key():
    assert is_derivative_key("images/editor/thumbnail/1700-cat.png")
    assert is_derivative_key("images/medium/1700-cat.png")
    assert not is_derivative_key("images/editor/1700-cat.png")
    assert not is_derivative_key("images/editor/thumbnail")


def test_delete_all_without_existing_objects_completes(store):
    report = asyncio.run(DerivativeStore(store).delete_all("1700-missing.png", context="FAQ Update"))
    assert report.ok
    assert report.deleted_keys == []
    assert {o.status for o in report.outcomes} == {NOT_FOUND}


def test_delete_all_removes_every_variant(store, put_object):
    for key in (
        "images/editor/1700-cat.png",
        "images/editor/thumbnail/1700-cat.png",
        "images/editor/medium/1700-cat.png",
        "images/large/1700-cat.png",
        "images/editor/thumbnail/1700-other.png",
    ):
        put_object(key)

    report = asyncio.run(DerivativeStore(store).delete_all("1700-cat.png"))

    assert report.ok
    assert sorted(report.deleted_keys) == [
        "images/editor/1700-cat.png",
        "images/editor/medium/1700-cat.png",
        "images/editor/thumbnail/1700-cat.png",
        "images/large/1700-cat.png",
    ]
    assert asyncio.run(store.list("images/")) == ["images/editor/thumbnail/1700-other.png"]


def test_delete_all_logs_and_swallows_other_errors(store, put_object, caplog):
    put_object("images/editor/1700-cat.png")
    put_object("images/editor/large/1700-cat.png")
    flaky = _FlakyStore(store, broken_key="images/editor/1700-cat.png")

    with caplog.at_level(logging.WARNING):
        report = asyncio.run(DerivativeStore(flaky).delete_all("1700-cat.png", context="Page Delete"))

    assert not report.ok
    assert report.failed_keys == ["images/editor/1700-cat.png"]
    assert "images/editor/large/1700-cat.png" in report.deleted_keys
    assert "[Page Delete]" in caplog.text
    assert "not_found" not in caplog.text


def test_delete_all_times_out_per_key():
    report = asyncio.run(DerivativeStore(_StuckStore(), timeout=0.01).delete_all("1700-cat.png", namespace="editor"))
    assert {o.status for o in report.outcomes} == {FAILED}
    assert all(o.error == "timeout" for o in report.outcomes)


def test_write_derivative_overwrites(store):
    derivatives = DerivativeStore(store)
    asyncio.run(derivatives.write_derivative("1700-cat.png", "medium", b"first", "image/webp"))
    key = asyncio.run(derivatives.write_derivative("1700-cat.png", "medium", b"second", "image/webp"))

    assert key == "images/editor/medium/1700-cat.png"
    assert asyncio.run(derivatives.read_derivative("1700-cat.png", "medium")) == b"second"
    assert asyncio.run(derivatives.missing_sizes("1700-cat.png")) == ["thumbnail", "large"]


def test_delete_statuses_are_reported(store, put_object):
    put_object("images/original/1700-cover.jpg")
    report = asyncio.run(DerivativeStore(store).delete_all("1700-cover.jpg", namespace="original"))
    statuses = {o.key: o.status for o in report.outcomes}
    assert statuses["images/original/1700-cover.jpg"] == DELETED
    assert statuses["images/original/thumbnail/1700-cover.jpg"] == NOT_FOUND
