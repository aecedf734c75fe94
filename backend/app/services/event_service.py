"""이벤트 도메인 서비스 레이어입니다. 본문 이미지와 대표/썸네일 이미지를 함께 정리합니다."""

from sqlalchemy.orm import Session
from fastapi import HTTPException
from app.models.event import Event
from app.schemas.content import EventCreate, EventUpdate
from app.services import content_image_reconciler
from app.services.content_kinds import EVENT
from app.services.object_store import ObjectStore


def get_events(db: Session, published_only: bool = False):
    query = db.query(Event)
    if published_only:
        query = query.filter(Event.published == True)  # noqa: E712
    return query.order_by(Event.start_at.desc(), Event.event_id.desc()).all()


def get_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="이벤트를 찾을 수 없습니다.")
    return event


def _validate_period(start_at, end_at):
    if start_at and end_at and end_at < start_at:
        raise HTTPException(status_code=400, detail="종료 일시는 시작 일시 이후여야 합니다.")


def create_event(db: Session, data: EventCreate) -> Event:
    _validate_period(data.start_at, data.end_at)
    event = Event(**data.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def update_event(db: Session, event_id: int, data: EventUpdate, store: ObjectStore) -> Event:
    event = get_event(db, event_id)
    payload = data.model_dump(exclude_unset=True)
    # 대표/썸네일 이미지는 null 로 명시하면 제거한다
    for k in ("title", "content", "start_at", "end_at", "published"):
        if payload.get(k, ...) is None:
            payload.pop(k)
    _validate_period(payload.get("start_at", event.start_at), payload.get("end_at", event.end_at))

    old_urls = EVENT.referenced_image_urls(event)
    for k, v in payload.items():
        setattr(event, k, v)
    db.commit()
    db.refresh(event)

    content_image_reconciler.cleanup_removed_images(
        store, old_urls, EVENT.referenced_image_urls(event), context=EVENT.context("Update")
    )
    return event


def delete_event(db: Session, event_id: int, store: ObjectStore) -> bool:
    event = get_event(db, event_id)
    result = content_image_reconciler.cleanup_all_images(
        store, EVENT.referenced_image_urls(event), context=EVENT.context("Delete")
    )
    db.delete(event)
    db.commit()
    return result.ok
