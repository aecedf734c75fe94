"""공지사항 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.content import DeleteResult, NoticeCreate, NoticeOut, NoticeUpdate
from app.services import notice_service
from app.services.object_store import ObjectStore, get_object_store

router = APIRouter(prefix="/api/notices", tags=["notices"])


@router.get("", response_model=List[NoticeOut])
def list_notices(published_only: bool = False, db: Session = Depends(get_db)):
    return notice_service.get_notices(db, published_only=published_only)


@router.post("", response_model=NoticeOut)
def create_notice(data: NoticeCreate, db: Session = Depends(get_db)):
    return notice_service.create_notice(db, data)


@router.get("/{notice_id}", response_model=NoticeOut)
def get_notice(notice_id: int, db: Session = Depends(get_db)):
    return notice_service.get_notice(db, notice_id)


@router.put("/{notice_id}", response_model=NoticeOut)
def update_notice(
    notice_id: int,
    data: NoticeUpdate,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    return notice_service.update_notice(db, notice_id, data, store)


@router.delete("/{notice_id}", response_model=DeleteResult)
def delete_notice(notice_id: int, db: Session = Depends(get_db), store: ObjectStore = Depends(get_object_store)):
    cleanup_ok = notice_service.delete_notice(db, notice_id, store)
    return DeleteResult(success=True, image_cleanup_ok=cleanup_ok)
