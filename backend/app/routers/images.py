"""이미지 업로드/정리 API 라우터입니다. 업로드 완료 후 파생 이미지 생성은 백그라운드로 넘깁니다."""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.storage import ImageCleanupOut, StorageEvent, UploadedImageOut
from app.services import editor_image_service
from app.services.derivative_pipeline import DerivativePipeline
from app.services.object_store import ObjectStore, get_object_store
from app.utils.helpers import EDITOR_TARGET, save_image_upload

router = APIRouter(prefix="/api/images", tags=["images"])


@router.post("/upload", response_model=UploadedImageOut)
async def upload_image(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    target: str = Form(EDITOR_TARGET),
    store: ObjectStore = Depends(get_object_store),
):
    saved = await save_image_upload(file, target, store)
    # 스토리지 finalize 이벤트와 동일하게 파이프라인에 전달한다 (응답은 기다리지 않음)
    event = StorageEvent(key=saved["path"], content_type=saved["content_type"])
    background_tasks.add_task(DerivativePipeline(store).process_event, event)
    return UploadedImageOut(
        path=saved["path"],
        file_name=saved["file_name"],
        public_url=saved["public_url"],
        size=saved["size"],
    )


@router.post("/cleanup", response_model=ImageCleanupOut)
def cleanup_images(
    dry_run: bool = True,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    return editor_image_service.cleanup_orphan_images(db, store, dry_run=dry_run)
