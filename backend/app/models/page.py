"""메뉴에 연결되는 정적 페이지 모델 정의입니다. live/draft 두 벌의 본문을 가진다."""

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.database import Base


class Page(Base):
    __tablename__ = "pages"

    page_id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(Integer, nullable=True)
    slug = Column(String(200), nullable=False, unique=True)
    labels_live = Column(JSON, nullable=True)
    labels_draft = Column(JSON, nullable=True)
    content_live = Column(JSON, nullable=True)
    content_draft = Column(JSON, nullable=True)
    editor_type = Column(String(20), nullable=False, default="toast")
    save_format = Column(String(20), nullable=False, default="markdown")  # markdown/html
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, nullable=True)
    draft_updated_at = Column(DateTime, nullable=True)
