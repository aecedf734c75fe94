"""FAQ 콘텐츠를 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.database import Base


class Faq(Base):
    __tablename__ = "faqs"

    faq_id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(50), nullable=True)
    question = Column(JSON, nullable=False)  # {"ko": ..., "en": ...}
    answer = Column(JSON, nullable=False)
    published = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, onupdate=func.now(), nullable=True)
