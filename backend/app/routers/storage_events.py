"""스토리지 finalize 알림(push 구독)을 받아 파생 이미지 파이프라인을 실행하는 라우터입니다."""

from fastapi import APIRouter, BackgroundTasks, Depends

from app.schemas.storage import StorageEvent, StorageEventAccepted
from app.services.derivative_pipeline import DerivativePipeline
from app.services.object_store import ObjectStore, get_object_store

router = APIRouter(prefix="/api/storage", tags=["storage"])


@router.post("/events", status_code=202, response_model=StorageEventAccepted)
async def receive_storage_event(
    event: StorageEvent,
    background_tasks: BackgroundTasks,
    store: ObjectStore = Depends(get_object_store),
):
    # 같은 이벤트가 여러 번 전달되어도 결과는 덮어쓰기라 안전하다
    background_tasks.add_task(DerivativePipeline(store).process_event, event)
    return StorageEventAccepted(key=event.key)
