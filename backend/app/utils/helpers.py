import re
import time
from fastapi import UploadFile, HTTPException
from app.config import settings
from app.services.derivative_store import original_key
from app.services.object_store import ObjectStore, public_url

EDITOR_TARGET = "editor"
UPLOAD_TARGETS = {EDITOR_TARGET, "featuredImage", "thumbnail", "authorImage"}


def sanitize_file_name(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename or "") or "upload.bin"


def build_base_file_name(filename: str, now_ms: int | None = None) -> str:
    # 원본과 모든 파생 이미지를 묶는 키. 시각 prefix 로 충돌을 피한다.
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{sanitize_file_name(filename)}"


def validate_image(file: UploadFile) -> str:
    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="이미지 파일만 업로드할 수 있습니다.")
    return content_type


async def save_image_upload(file: UploadFile, target: str, store: ObjectStore) -> dict:
    if target not in UPLOAD_TARGETS:
        raise HTTPException(status_code=400, detail="유효하지 않은 업로드 target 입니다.")
    content_type = validate_image(file)
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="파일이 제공되지 않았습니다.")
    if len(content) > settings.MAX_IMAGE_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="파일 크기는 10MB를 초과할 수 없습니다.")

    base_file_name = build_base_file_name(file.filename or "upload.bin")
    namespace = "editor" if target == EDITOR_TARGET else "original"
    key = original_key(namespace, base_file_name)
    await store.put(key, content, content_type)

    return {
        "path": key,
        "file_name": base_file_name,
        "public_url": public_url(key),
        "size": len(content),
        "content_type": content_type,
    }
