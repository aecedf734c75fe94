"""FAQ 도메인 서비스 레이어입니다. 답변 본문 이미지 정리를 함께 수행합니다."""

from sqlalchemy.orm import Session
from fastapi import HTTPException
from app.models.faq import Faq
from app.schemas.content import FaqCreate, FaqUpdate
from app.services import content_image_reconciler
from app.services.content_kinds import FAQ
from app.services.object_store import ObjectStore


def get_faqs(db: Session, published_only: bool = False):
    query = db.query(Faq)
    if published_only:
        query = query.filter(Faq.published == True)  # noqa: E712
    return query.order_by(Faq.display_order.asc(), Faq.faq_id.desc()).all()


def get_faq(db: Session, faq_id: int) -> Faq:
    faq = db.query(Faq).filter(Faq.faq_id == faq_id).first()
    if not faq:
        raise HTTPException(status_code=404, detail="FAQ를 찾을 수 없습니다.")
    return faq


def create_faq(db: Session, data: FaqCreate) -> Faq:
    faq = Faq(**data.model_dump())
    db.add(faq)
    db.commit()
    db.refresh(faq)
    return faq


def update_faq(db: Session, faq_id: int, data: FaqUpdate, store: ObjectStore) -> Faq:
    faq = get_faq(db, faq_id)
    old_urls = FAQ.referenced_image_urls(faq)
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(faq, k, v)
    db.commit()
    db.refresh(faq)

    # 저장이 끝난 뒤 빠진 이미지만 정리한다 (실패해도 수정 결과는 유지)
    content_image_reconciler.cleanup_removed_images(
        store, old_urls, FAQ.referenced_image_urls(faq), context=FAQ.context("Update")
    )
    return faq


def delete_faq(db: Session, faq_id: int, store: ObjectStore) -> bool:
    faq = get_faq(db, faq_id)
    result = content_image_reconciler.cleanup_all_images(
        store, FAQ.referenced_image_urls(faq), context=FAQ.context("Delete")
    )
    db.delete(faq)
    db.commit()
    return result.ok
