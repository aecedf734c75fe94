"""공지사항 도메인 서비스 레이어입니다."""

from sqlalchemy.orm import Session
from fastapi import HTTPException
from app.models.notice import Notice
from app.schemas.content import NoticeCreate, NoticeUpdate
from app.services import content_image_reconciler
from app.services.content_kinds import NOTICE
from app.services.object_store import ObjectStore


def get_notices(db: Session, published_only: bool = False):
    query = db.query(Notice)
    if published_only:
        query = query.filter(Notice.published == True)  # noqa: E712
    return query.order_by(Notice.created_at.desc(), Notice.notice_id.desc()).all()


def get_notice(db: Session, notice_id: int) -> Notice:
    notice = db.query(Notice).filter(Notice.notice_id == notice_id).first()
    if not notice:
        raise HTTPException(status_code=404, detail="공지사항을 찾을 수 없습니다.")
    return notice


def create_notice(db: Session, data: NoticeCreate) -> Notice:
    notice = Notice(**data.model_dump())
    db.add(notice)
    db.commit()
    db.refresh(notice)
    return notice


def update_notice(db: Session, notice_id: int, data: NoticeUpdate, store: ObjectStore) -> Notice:
    notice = get_notice(db, notice_id)
    old_urls = NOTICE.referenced_image_urls(notice)
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(notice, k, v)
    db.commit()
    db.refresh(notice)

    content_image_reconciler.cleanup_removed_images(
        store, old_urls, NOTICE.referenced_image_urls(notice), context=NOTICE.context("Update")
    )
    return notice


def delete_notice(db: Session, notice_id: int, store: ObjectStore) -> bool:
    notice = get_notice(db, notice_id)
    result = content_image_reconciler.cleanup_all_images(
        store, NOTICE.referenced_image_urls(notice), context=NOTICE.context("Delete")
    )
    db.delete(notice)
    db.commit()
    return result.ok
