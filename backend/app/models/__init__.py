"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.faq import Faq
from app.models.page import Page
from app.models.notice import Notice
from app.models.event import Event

__all__ = [
    "Faq",
    "Page",
    "Notice",
    "Event",
]
