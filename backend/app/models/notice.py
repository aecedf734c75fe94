"""공지사항 모델 정의입니다."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer
from sqlalchemy.sql import func

from app.database import Base


class Notice(Base):
    __tablename__ = "notices"

    notice_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(JSON, nullable=False)
    one_liner = Column(JSON, nullable=True)  # 롤링 배너용 한 줄 문구
    content = Column(JSON, nullable=False)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, onupdate=func.now(), nullable=True)
