"""원본 이미지와 사이즈별 파생 이미지(thumbnail/medium/large) 묶음을 다루는 스토리지 래퍼입니다."""

import asyncio
import logging
from dataclasses import dataclass, field

from app.config import settings
from app.services.object_store import ObjectNotFound, ObjectStore

logger = logging.getLogger(__name__)

ORIGINAL_SIZE = "original"

DELETED = "deleted"
NOT_FOUND = "not_found"
FAILED = "failed"


@dataclass
class DeleteOutcome:
    key: str
    status: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != FAILED


@dataclass
class CleanupReport:
    """Advisory result of deleting one base filename's variant set."""

    base_file_name: str
    context: str
    outcomes: list[DeleteOutcome] = field(default_factory=list)

    @property
    def deleted_keys(self) -> list[str]:
        return [o.key for o in self.outcomes if o.status == DELETED]

    @property
    def failed_keys(self) -> list[str]:
        return [o.key for o in self.outcomes if o.status == FAILED]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


def original_key(namespace: str, base_file_name: str) -> str:
    return f"images/{namespace}/{base_file_name}"


def derivative_key(namespace: str, size: str, base_file_name: str) -> str:
    return f"images/{namespace}/{size}/{base_file_name}"


def legacy_key(size: str, base_file_name: str) -> str:
    return f"images/{size}/{base_file_name}"


def is_derivative_key(key: str) -> bool:
    segments = key.split("/")
    return any(size in segments[:-1] for size in settings.derivative_size_names())


def split_original_key(key: str) -> tuple[str | None, str | None]:
    """``images/<namespace>/<file>`` → (namespace, file). Nested keys are not originals."""
    parts = key.split("/")
    if len(parts) != 3 or parts[0] != "images" or not parts[2]:
        return None, None
    return parts[1], parts[2]


def variant_keys(base_file_name: str, namespace: str | None = None) -> list[str]:
    namespaces = [namespace] if namespace else list(settings.IMAGE_NAMESPACES)
    sizes = [*settings.derivative_size_names(), ORIGINAL_SIZE]
    keys: list[str] = []
    for ns in namespaces:
        keys.append(original_key(ns, base_file_name))
        keys.extend(derivative_key(ns, size, base_file_name) for size in sizes)
    # 구 경로 호환성: images/{size}/{fileName}
    keys.extend(legacy_key(size, base_file_name) for size in sizes)
    return list(dict.fromkeys(keys))


class DerivativeStore:
    def __init__(self, store: ObjectStore, timeout: float | None = None):
        self.store = store
        self.timeout = settings.STORAGE_OP_TIMEOUT_SECONDS if timeout is None else timeout

    async def delete_all(
        self,
        base_file_name: str,
        namespace: str | None = None,
        context: str = "Storage",
    ) -> CleanupReport:
        """Delete the original and every derivative of ``base_file_name``.

        Best-effort: a missing object counts as success and any other error
        is logged and recorded in the report instead of being raised.
        """
        keys = variant_keys(base_file_name, namespace)
        outcomes = await asyncio.gather(*(self._delete_one(key, context) for key in keys))
        return CleanupReport(base_file_name=base_file_name, context=context, outcomes=list(outcomes))

    async def _delete_one(self, key: str, context: str) -> DeleteOutcome:
        try:
            await asyncio.wait_for(self.store.delete(key), timeout=self.timeout)
        except ObjectNotFound:
            return DeleteOutcome(key=key, status=NOT_FOUND)
        except asyncio.TimeoutError:
            logger.warning("[%s] image delete timed out after %ss: %s", context, self.timeout, key)
            return DeleteOutcome(key=key, status=FAILED, error="timeout")
        except Exception as exc:
            logger.warning("[%s] image delete failed: %s (%s)", context, key, exc)
            return DeleteOutcome(key=key, status=FAILED, error=str(exc))
        return DeleteOutcome(key=key, status=DELETED)

    async def write_derivative(
        self,
        base_file_name: str,
        size: str,
        data: bytes,
        content_type: str,
        namespace: str = "editor",
    ) -> str:
        key = derivative_key(namespace, size, base_file_name)
        await asyncio.wait_for(self.store.put(key, data, content_type), timeout=self.timeout)
        return key

    async def read_derivative(self, base_file_name: str, size: str, namespace: str = "editor") -> bytes:
        key = derivative_key(namespace, size, base_file_name)
        return await asyncio.wait_for(self.store.get(key), timeout=self.timeout)

    async def missing_sizes(self, base_file_name: str, namespace: str = "editor") -> list[str]:
        missing = []
        for size in settings.derivative_size_names():
            if not await self.store.exists(derivative_key(namespace, size, base_file_name)):
                missing.append(size)
        return missing
