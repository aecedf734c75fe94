"""FAQ/페이지/공지/이벤트 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class LocalizedField(BaseModel):
    ko: str
    en: Optional[str] = None


class FaqBase(BaseModel):
    category: Optional[str] = None
    question: LocalizedField
    answer: LocalizedField
    published: bool = False
    display_order: int = 0


class FaqCreate(FaqBase):
    pass


class FaqUpdate(BaseModel):
    category: Optional[str] = None
    question: Optional[LocalizedField] = None
    answer: Optional[LocalizedField] = None
    published: Optional[bool] = None
    display_order: Optional[int] = None


class FaqOut(FaqBase):
    faq_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PageCreate(BaseModel):
    menu_id: Optional[int] = None
    slug: str = Field(..., min_length=1, max_length=200)
    labels: LocalizedField
    content: LocalizedField
    editor_type: str = "toast"
    save_format: Literal["markdown", "html"] = "markdown"


class PageUpdate(BaseModel):
    action: Literal["draft", "publish"]
    payload: PageCreate


class PageOut(BaseModel):
    page_id: int
    menu_id: Optional[int] = None
    slug: str
    labels_live: Optional[LocalizedField] = None
    labels_draft: Optional[LocalizedField] = None
    content_live: Optional[LocalizedField] = None
    content_draft: Optional[LocalizedField] = None
    editor_type: str
    save_format: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    draft_updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NoticeBase(BaseModel):
    title: LocalizedField
    one_liner: Optional[LocalizedField] = None
    content: LocalizedField
    published: bool = False


class NoticeCreate(NoticeBase):
    pass


class NoticeUpdate(BaseModel):
    title: Optional[LocalizedField] = None
    one_liner: Optional[LocalizedField] = None
    content: Optional[LocalizedField] = None
    published: Optional[bool] = None


class NoticeOut(NoticeBase):
    notice_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventBase(BaseModel):
    title: LocalizedField
    content: LocalizedField
    featured_image: Optional[str] = None
    thumbnail_image: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    published: bool = False


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    title: Optional[LocalizedField] = None
    content: Optional[LocalizedField] = None
    featured_image: Optional[str] = None
    thumbnail_image: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    published: Optional[bool] = None


class EventOut(EventBase):
    event_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeleteResult(BaseModel):
    success: bool = True
    image_cleanup_ok: bool = True
