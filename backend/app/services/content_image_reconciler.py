"""콘텐츠 수정/삭제 시 더 이상 참조되지 않는 이미지 묶음을 정리하는 서비스입니다.

엔티티 단위 비교만 수행한다. 같은 이미지를 다른 엔티티가 함께 쓰고 있어도
수정/삭제된 엔티티에서 빠지면 삭제 대상이 된다. 전체 참조 기준 정리는
editor_image_service.cleanup_orphan_images 를 사용한다.
"""

import asyncio
import concurrent.futures
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable

from app.config import settings
from app.services.derivative_store import CleanupReport, DerivativeStore
from app.services.object_store import ObjectStore
from app.utils.content_images import collect_image_urls, locale_values, resolve_base_file_name

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    context: str
    urls: list[str] = field(default_factory=list)
    base_file_names: list[str] = field(default_factory=list)
    skipped_urls: list[str] = field(default_factory=list)
    # 빠진 URL 이지만 새 본문이 다른 크기로 계속 참조하는 파일명
    kept_base_file_names: list[str] = field(default_factory=list)
    reports: list[CleanupReport] = field(default_factory=list)
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.error is None and all(r.ok for r in self.reports)


def removed_image_urls(old_urls: Iterable[str], new_urls: Iterable[str]) -> list[str]:
    keep = set(new_urls)
    return [url for url in dict.fromkeys(old_urls) if url not in keep]


class ContentImageReconciler:
    def __init__(self, derivatives: DerivativeStore, timeout: float | None = None):
        self.derivatives = derivatives
        self.timeout = settings.IMAGE_CLEANUP_TIMEOUT_SECONDS if timeout is None else timeout

    async def reconcile_update(self, old_content, new_content, context: str) -> ReconcileResult:
        """Delete images referenced by ``old_content`` but not by ``new_content``.

        Both sides are locale maps (or lists of them); every locale value is
        scanned and the union is compared.
        """
        old_urls = collect_image_urls(locale_values(old_content))
        new_urls = collect_image_urls(locale_values(new_content))
        return await self.reconcile_references(old_urls, new_urls, context)

    async def reconcile_delete(self, content, context: str) -> ReconcileResult:
        return await self.delete_references(collect_image_urls(locale_values(content)), context)

    async def reconcile_references(self, old_urls: Iterable[str], new_urls: Iterable[str], context: str) -> ReconcileResult:
        new_urls = list(new_urls)
        # 삭제는 파일명 묶음 단위라서 URL 이 바뀌어도 같은 파일명을 참조하면 남긴다
        referenced = {name for name in map(resolve_base_file_name, new_urls) if name}
        return await self.delete_references(removed_image_urls(old_urls, new_urls), context, keep=referenced)

    async def delete_references(self, urls: Iterable[str], context: str, keep: Iterable[str] = ()) -> ReconcileResult:
        result = ReconcileResult(context=context, urls=list(dict.fromkeys(urls)))
        keep = set(keep)
        names: dict[str, None] = {}
        for url in result.urls:
            name = resolve_base_file_name(url)
            if name is None:
                result.skipped_urls.append(url)
            elif name in keep:
                if name not in result.kept_base_file_names:
                    result.kept_base_file_names.append(name)
            else:
                names.setdefault(name, None)
        result.base_file_names = list(names)
        if not names:
            return result

        tasks = [
            asyncio.ensure_future(self.derivatives.delete_all(name, context=context))
            for name in result.base_file_names
        ]
        done, pending = await asyncio.wait(tasks, timeout=self.timeout)
        for task in pending:
            task.cancel()
        if pending:
            result.timed_out = True
            logger.warning(
                "[%s] image cleanup timed out after %ss; %d of %d left unfinished",
                context, self.timeout, len(pending), len(tasks),
            )
        for task in tasks:
            if task not in done:
                continue
            if task.exception() is not None:
                result.error = str(task.exception())
                logger.error("[%s] image cleanup error: %s", context, task.exception())
                continue
            report = task.result()
            result.reports.append(report)
            if not report.ok:
                logger.warning("[%s] image cleanup incomplete for %s: %s", context, report.base_file_name, report.failed_keys)
        return result


# 요청 스레드가 기다리는 시간 외에 루프가 결과를 넘겨주는 데 허용하는 여유
_HANDOFF_GRACE_SECONDS = 1.0

_cleanup_loop: asyncio.AbstractEventLoop | None = None
_cleanup_loop_lock = threading.Lock()


def _get_cleanup_loop() -> asyncio.AbstractEventLoop:
    # 프로세스 수명 동안 유지되는 정리 전용 루프. 멈춘 작업 스레드를 종료 시 기다리지 않는다.
    global _cleanup_loop
    with _cleanup_loop_lock:
        if _cleanup_loop is None or _cleanup_loop.is_closed():
            loop = asyncio.new_event_loop()
            threading.Thread(target=loop.run_forever, name="image-cleanup", daemon=True).start()
            _cleanup_loop = loop
        return _cleanup_loop


def _run(coro, context: str, timeout: float) -> ReconcileResult:
    # 동기 라우터(스레드풀)에서 호출된다. 정리 실패가 본 요청을 실패시키지 않는다.
    try:
        future = asyncio.run_coroutine_threadsafe(coro, _get_cleanup_loop())
    except Exception as exc:
        coro.close()
        logger.error("[%s] image cleanup aborted: %s", context, exc)
        return ReconcileResult(context=context, error=str(exc))
    try:
        return future.result(timeout=timeout + _HANDOFF_GRACE_SECONDS)
    except concurrent.futures.TimeoutError:
        future.cancel()
        logger.warning("[%s] image cleanup did not hand back within %ss", context, timeout)
        return ReconcileResult(context=context, timed_out=True)
    except Exception as exc:
        logger.error("[%s] image cleanup aborted: %s", context, exc)
        return ReconcileResult(context=context, error=str(exc))


def cleanup_removed_images(store: ObjectStore, old_urls: Iterable[str], new_urls: Iterable[str], context: str) -> ReconcileResult:
    reconciler = ContentImageReconciler(DerivativeStore(store))
    return _run(reconciler.reconcile_references(list(old_urls), list(new_urls), context), context, reconciler.timeout)


def cleanup_all_images(store: ObjectStore, urls: Iterable[str], context: str) -> ReconcileResult:
    reconciler = ContentImageReconciler(DerivativeStore(store))
    return _run(reconciler.delete_references(list(urls), context), context, reconciler.timeout)
