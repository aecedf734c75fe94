"""이벤트 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.content import DeleteResult, EventCreate, EventOut, EventUpdate
from app.services import event_service
from app.services.object_store import ObjectStore, get_object_store

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[EventOut])
def list_events(published_only: bool = False, db: Session = Depends(get_db)):
    return event_service.get_events(db, published_only=published_only)


@router.post("", response_model=EventOut)
def create_event(data: EventCreate, db: Session = Depends(get_db)):
    return event_service.create_event(db, data)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    data: EventUpdate,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    return event_service.update_event(db, event_id, data, store)


@router.delete("/{event_id}", response_model=DeleteResult)
def delete_event(event_id: int, db: Session = Depends(get_db), store: ObjectStore = Depends(get_object_store)):
    cleanup_ok = event_service.delete_event(db, event_id, store)
    return DeleteResult(success=True, image_cleanup_ok=cleanup_ok)
