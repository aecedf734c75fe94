"""이벤트 모델 정의입니다. 본문 외에 대표/썸네일 이미지 URL을 가진다."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(JSON, nullable=False)
    content = Column(JSON, nullable=False)
    featured_image = Column(String(1000), nullable=True)
    thumbnail_image = Column(String(1000), nullable=True)
    start_at = Column(DateTime, nullable=True)
    end_at = Column(DateTime, nullable=True)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, onupdate=func.now(), nullable=True)
