"""스토리지 이벤트/업로드 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StorageEvent(BaseModel):
    # 스토리지 finalize 알림 payload. GCS 형식(name, contentType)도 그대로 받는다.
    key: str = Field(..., min_length=1, validation_alias=AliasChoices("key", "name"))
    content_type: Optional[str] = Field(None, validation_alias=AliasChoices("content_type", "contentType"))


class StorageEventAccepted(BaseModel):
    accepted: bool = True
    key: str


class UploadedImageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str
    file_name: str = Field(..., alias="fileName")
    public_url: str = Field(..., alias="publicUrl")
    size: int


class ImageCleanupOut(BaseModel):
    dry_run: bool
    referenced_count: int
    existing_count: int
    orphan_count: int
    deleted_count: int
    orphan_base_names: list[str]
