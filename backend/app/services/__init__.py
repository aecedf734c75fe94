"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    faq_service,
    page_service,
    notice_service,
    event_service,
    editor_image_service,
    content_image_reconciler,
)
