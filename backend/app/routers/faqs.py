"""FAQ 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.content import DeleteResult, FaqCreate, FaqOut, FaqUpdate
from app.services import faq_service
from app.services.object_store import ObjectStore, get_object_store

router = APIRouter(prefix="/api/faqs", tags=["faqs"])


@router.get("", response_model=List[FaqOut])
def list_faqs(published_only: bool = False, db: Session = Depends(get_db)):
    return faq_service.get_faqs(db, published_only=published_only)


@router.post("", response_model=FaqOut)
def create_faq(data: FaqCreate, db: Session = Depends(get_db)):
    return faq_service.create_faq(db, data)


@router.get("/{faq_id}", response_model=FaqOut)
def get_faq(faq_id: int, db: Session = Depends(get_db)):
    return faq_service.get_faq(db, faq_id)


@router.put("/{faq_id}", response_model=FaqOut)
def update_faq(
    faq_id: int,
    data: FaqUpdate,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    return faq_service.update_faq(db, faq_id, data, store)


@router.delete("/{faq_id}", response_model=DeleteResult)
def delete_faq(faq_id: int, db: Session = Depends(get_db), store: ObjectStore = Depends(get_object_store)):
    cleanup_ok = faq_service.delete_faq(db, faq_id, store)
    return DeleteResult(success=True, image_cleanup_ok=cleanup_ok)
