"""오브젝트 스토리지 접근 계층입니다. 키(경로) 단위의 get/put/delete 를 비동기로 제공합니다."""

import asyncio
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List
from urllib.parse import quote

from app.config import settings


class ObjectStoreError(Exception):
    pass


class ObjectNotFound(ObjectStoreError):
    def __init__(self, key: str):
        super().__init__(f"object not found: {key}")
        self.key = key


class ObjectStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> bytes:
        ...

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete ``key``; raises :class:`ObjectNotFound` when it does not exist."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def list(self, prefix: str = "") -> List[str]:
        ...


class LocalObjectStore(ObjectStore):
    """Filesystem backed store. Keys map to paths below ``root``."""

    _TMP_SUFFIX = ".part"

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        normalized = str(key or "").strip().replace("\\", "/")
        parts = [part for part in normalized.split("/") if part]
        if not parts or normalized.startswith("/") or any(part in {".", ".."} for part in parts):
            raise ObjectStoreError(f"invalid object key: {key!r}")
        return self.root.joinpath(*parts)

    async def get(self, key: str) -> bytes:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        await asyncio.to_thread(self._write, key, data)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._unlink, key)

    async def exists(self, key: str) -> bool:
        path = self._path(key)
        return await asyncio.to_thread(path.is_file)

    async def list(self, prefix: str = "") -> List[str]:
        return await asyncio.to_thread(self._walk, prefix)

    def _read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise ObjectNotFound(key)

    def _write(self, key: str, data: bytes):
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # 같은 키에 대한 동시 쓰기에도 반쯤 쓰인 파일이 보이지 않도록 교체 방식으로 저장한다.
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}{self._TMP_SUFFIX}")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _unlink(self, key: str):
        path = self._path(key)
        try:
            path.unlink()
        except (FileNotFoundError, IsADirectoryError):
            raise ObjectNotFound(key)

    def _walk(self, prefix: str) -> List[str]:
        if not self.root.exists():
            return []
        keys: List[str] = []
        for dirpath, _, filenames in os.walk(self.root):
            for filename in filenames:
                if filename.endswith(self._TMP_SUFFIX):
                    continue
                abs_path = os.path.join(dirpath, filename)
                key = os.path.relpath(abs_path, self.root).replace("\\", "/")
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)


def get_object_store() -> ObjectStore:
    return LocalObjectStore(settings.STORAGE_DIR)


def public_url(key: str) -> str:
    base = settings.PUBLIC_STORAGE_BASE_URL.rstrip("/")
    return f"{base}/{settings.STORAGE_BUCKET}/o/{quote(key, safe='')}?alt=media"
