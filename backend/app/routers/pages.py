"""페이지 API 라우터입니다. 수정 요청은 action(draft/publish)에 따라 저장 대상이 달라집니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.content import DeleteResult, PageCreate, PageOut, PageUpdate
from app.services import page_service
from app.services.object_store import ObjectStore, get_object_store

router = APIRouter(prefix="/api/pages", tags=["pages"])


@router.get("", response_model=List[PageOut])
def list_pages(menu_id: Optional[int] = None, db: Session = Depends(get_db)):
    return page_service.get_pages(db, menu_id=menu_id)


@router.post("", response_model=PageOut)
def create_page(data: PageCreate, db: Session = Depends(get_db)):
    return page_service.create_page(db, data)


@router.get("/{page_id}", response_model=PageOut)
def get_page(page_id: int, db: Session = Depends(get_db)):
    return page_service.get_page(db, page_id)


@router.put("/{page_id}", response_model=PageOut)
def update_page(
    page_id: int,
    data: PageUpdate,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    return page_service.update_page(db, page_id, data, store)


@router.delete("/{page_id}", response_model=DeleteResult)
def delete_page(page_id: int, db: Session = Depends(get_db), store: ObjectStore = Depends(get_object_store)):
    cleanup_ok = page_service.delete_page(db, page_id, store)
    return DeleteResult(success=True, image_cleanup_ok=cleanup_ok)
