"""페이지 도메인 서비스 레이어입니다. draft 저장/publish 와 live·draft 본문 이미지 정리를 담당합니다."""

from datetime import datetime

from sqlalchemy.orm import Session
from fastapi import HTTPException
from app.models.page import Page
from app.schemas.content import PageCreate, PageUpdate
from app.services import content_image_reconciler
from app.services.content_kinds import PAGE
from app.services.object_store import ObjectStore


def get_pages(db: Session, menu_id: int | None = None):
    query = db.query(Page)
    if menu_id is not None:
        query = query.filter(Page.menu_id == menu_id)
    return query.order_by(Page.page_id.asc()).all()


def get_page(db: Session, page_id: int) -> Page:
    page = db.query(Page).filter(Page.page_id == page_id).first()
    if not page:
        raise HTTPException(status_code=404, detail="페이지를 찾을 수 없습니다.")
    return page


def _ensure_unique_slug(db: Session, slug: str, page_id: int | None = None):
    query = db.query(Page.page_id).filter(Page.slug == slug)
    if page_id is not None:
        query = query.filter(Page.page_id != page_id)
    if query.first():
        raise HTTPException(status_code=400, detail="이미 사용 중인 slug 입니다.")


def create_page(db: Session, data: PageCreate) -> Page:
    _ensure_unique_slug(db, data.slug)
    # 신규 페이지는 draft 로만 저장한다. publish 는 수정 API 에서 수행한다.
    page = Page(
        menu_id=data.menu_id,
        slug=data.slug,
        labels_draft=data.labels.model_dump(),
        content_draft=data.content.model_dump(),
        editor_type=data.editor_type or "toast",
        save_format=data.save_format or "markdown",
        draft_updated_at=datetime.now(),
    )
    db.add(page)
    db.commit()
    db.refresh(page)
    return page


def update_page(db: Session, page_id: int, data: PageUpdate, store: ObjectStore) -> Page:
    page = get_page(db, page_id)
    payload = data.payload
    _ensure_unique_slug(db, payload.slug, page_id=page_id)

    old_urls = PAGE.referenced_image_urls(page)
    now = datetime.now()
    labels = payload.labels.model_dump()
    content = payload.content.model_dump()

    page.menu_id = payload.menu_id
    page.slug = payload.slug
    page.editor_type = payload.editor_type or "toast"
    page.save_format = payload.save_format or "markdown"
    page.labels_draft = labels
    page.content_draft = content
    page.draft_updated_at = now
    if data.action == "publish":
        page.labels_live = labels
        page.content_live = content
        page.updated_at = now
    db.commit()
    db.refresh(page)

    # draft 저장 시에도 live 본문이 참조하는 이미지는 남는다 (live+draft 합집합 비교)
    content_image_reconciler.cleanup_removed_images(
        store, old_urls, PAGE.referenced_image_urls(page), context=PAGE.context("Update")
    )
    return page


def delete_page(db: Session, page_id: int, store: ObjectStore) -> bool:
    page = get_page(db, page_id)
    result = content_image_reconciler.cleanup_all_images(
        store, PAGE.referenced_image_urls(page), context=PAGE.context("Delete")
    )
    db.delete(page)
    db.commit()
    return result.ok
