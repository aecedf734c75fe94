"""이미지를 포함할 수 있는 콘텐츠 종류(FAQ/페이지/공지/이벤트) 레지스트리입니다."""

from dataclasses import dataclass

from app.models.event import Event
from app.models.faq import Faq
from app.models.notice import Notice
from app.models.page import Page
from app.utils.content_images import collect_image_urls, locale_values


@dataclass(frozen=True)
class ContentKind:
    name: str
    label: str
    model: type
    # locale 맵({"ko": ..., "en": ...})으로 저장되는 본문 필드
    content_fields: tuple[str, ...]
    # 본문이 아닌 이미지 URL 단일 필드 (대표 이미지 등)
    attachment_fields: tuple[str, ...] = ()

    def image_sources(self, record) -> list[str]:
        return locale_values(*(getattr(record, name, None) for name in self.content_fields))

    def referenced_image_urls(self, record) -> list[str]:
        urls = collect_image_urls(self.image_sources(record))
        for name in self.attachment_fields:
            value = getattr(record, name, None)
            if value and value not in urls:
                urls.append(value)
        return urls

    def context(self, action: str) -> str:
        return f"{self.label} {action}"


FAQ = ContentKind(name="faq", label="FAQ", model=Faq, content_fields=("answer",))
PAGE = ContentKind(name="page", label="Page", model=Page, content_fields=("content_live", "content_draft"))
NOTICE = ContentKind(name="notice", label="Notice", model=Notice, content_fields=("content",))
EVENT = ContentKind(
    name="event",
    label="Event",
    model=Event,
    content_fields=("content",),
    attachment_fields=("featured_image", "thumbnail_image"),
)

CONTENT_KINDS = {kind.name: kind for kind in (FAQ, PAGE, NOTICE, EVENT)}
