"""스토리지 finalize 이벤트를 받아 에디터 이미지의 사이즈별 파생 이미지를 생성하는 비동기 파이프라인입니다.

- images/editor/<file>   → thumbnail, medium, large 생성 (병렬)
- images/original/<file> → 현재는 후처리하지 않는다
- 파생 이미지 경로(.../thumbnail/... 등)는 다시 처리하지 않는다 (자기 자신의 쓰기로 재귀 호출되는 것 방지)
"""

import asyncio
import io
import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum

from PIL import Image

from app.config import settings
from app.schemas.storage import StorageEvent
from app.services.derivative_store import DerivativeStore, derivative_key, is_derivative_key, split_original_key
from app.services.object_store import ObjectStore

logger = logging.getLogger(__name__)

EDITOR_NAMESPACE = "editor"
ORIGINAL_NAMESPACE = "original"


class PipelineState(str, Enum):
    UNINSPECTED = "uninspected"
    REJECTED = "rejected"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class SizeResult:
    size: str
    key: str
    width: int | None = None
    height: int | None = None
    byte_size: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineRun:
    key: str
    state: PipelineState = PipelineState.UNINSPECTED
    reason: str | None = None
    results: list[SizeResult] = field(default_factory=list)

    @property
    def generated(self) -> list[str]:
        return [r.key for r in self.results if r.ok]

    @property
    def failed(self) -> list[str]:
        return [r.size for r in self.results if not r.ok]


def render_derivative(data: bytes, width: int, fmt: str | None = None, quality: int | None = None) -> tuple[bytes, int, int]:
    """Resize ``data`` to ``width`` keeping the aspect ratio and encode it.

    Images narrower than ``width`` keep their size (no upscaling).
    """
    fmt = fmt or settings.IMAGE_OUTPUT_FORMAT
    quality = settings.IMAGE_OUTPUT_QUALITY if quality is None else quality

    with Image.open(io.BytesIO(data)) as img:
        img.load()
        src_w, src_h = img.size
        if src_w > width:
            target = (width, max(1, round(src_h * width / src_w)))
        else:
            target = (src_w, src_h)

        frame = img
        if frame.mode not in ("RGB", "RGBA"):
            has_alpha = frame.mode in ("LA", "PA") or "transparency" in frame.info
            frame = frame.convert("RGBA" if has_alpha else "RGB")
        if frame.size != target:
            frame = frame.resize(target, Image.Resampling.LANCZOS)

        out = io.BytesIO()
        frame.save(out, format=fmt, quality=quality)
        return out.getvalue(), target[0], target[1]


class DerivativePipeline:
    def __init__(self, store: ObjectStore, derivatives: DerivativeStore | None = None):
        self.store = store
        self.derivatives = derivatives or DerivativeStore(store)

    def classify(self, event: StorageEvent) -> tuple[PipelineState, str | None]:
        key = event.key
        if is_derivative_key(key):
            return PipelineState.REJECTED, "already a derivative"
        if not (event.content_type or "").startswith("image/"):
            return PipelineState.REJECTED, f"not an image: {event.content_type}"
        namespace, _ = split_original_key(key)
        if namespace == EDITOR_NAMESPACE:
            return PipelineState.PROCESSING, None
        if namespace == ORIGINAL_NAMESPACE:
            return PipelineState.COMPLETED, "original namespace is not post-processed"
        return PipelineState.REJECTED, "not an original upload"

    async def process_event(self, event: StorageEvent) -> PipelineRun:
        run = PipelineRun(key=event.key)
        run.state, run.reason = self.classify(event)
        if run.state == PipelineState.REJECTED:
            logger.info("[image-pipeline] skipped %s: %s", event.key, run.reason)
            return run
        if run.state == PipelineState.COMPLETED:
            logger.info("[image-pipeline] %s: %s", event.key, run.reason)
            return run

        namespace, base_file_name = split_original_key(event.key)
        try:
            data = await asyncio.wait_for(self.store.get(event.key), timeout=self.derivatives.timeout)
        except Exception as exc:
            # 원본 다운로드 실패 시 이번 이벤트는 중단한다. 재전달로 다시 시도된다.
            logger.error("[image-pipeline] download failed for %s: %s", event.key, exc)
            run.state = PipelineState.ABORTED
            run.reason = f"download failed: {exc}"
            return run
        logger.info("[image-pipeline] downloaded %s (%d bytes)", event.key, len(data))

        run.results = list(
            await asyncio.gather(
                *(
                    self._generate(namespace, base_file_name, data, size, width)
                    for size, width in settings.derivative_sizes()
                )
            )
        )
        run.state = PipelineState.COMPLETED
        if run.failed:
            run.reason = f"partial: failed sizes {', '.join(run.failed)}"
        logger.info("[image-pipeline] completed %s: %d/%d sizes", event.key, len(run.generated), len(run.results))
        return run

    async def _generate(self, namespace: str, base_file_name: str, data: bytes, size: str, width: int) -> SizeResult:
        result = SizeResult(size=size, key=derivative_key(namespace, size, base_file_name))
        try:
            encoded, out_w, out_h = await asyncio.to_thread(render_derivative, data, width)
            result.key = await self.derivatives.write_derivative(
                base_file_name,
                size,
                encoded,
                settings.IMAGE_OUTPUT_CONTENT_TYPE,
                namespace=namespace,
            )
        except Exception as exc:
            logger.warning("[image-pipeline] %s generation failed for %s: %s", size, base_file_name, exc)
            result.error = str(exc) or exc.__class__.__name__
            return result
        result.width, result.height, result.byte_size = out_w, out_h, len(encoded)
        logger.info("[image-pipeline] %s generated: %s (%d bytes)", size, result.key, len(encoded))
        return result

    async def backfill(self, namespace: str = EDITOR_NAMESPACE) -> list[PipelineRun]:
        """Replay finalize events for originals whose derivative set is incomplete."""
        runs: list[PipelineRun] = []
        for key in await self.store.list(f"images/{namespace}/"):
            ns, base_file_name = split_original_key(key)
            if ns != namespace:
                continue
            if not await self.derivatives.missing_sizes(base_file_name, namespace=namespace):
                continue
            content_type, _ = mimetypes.guess_type(base_file_name)
            runs.append(await self.process_event(StorageEvent(key=key, content_type=content_type)))
        return runs
