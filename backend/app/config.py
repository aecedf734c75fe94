"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import Dict, List, Tuple
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./cms.db"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Object storage
    STORAGE_DIR: str = "storage"
    STORAGE_BUCKET: str = "cms-assets"
    PUBLIC_STORAGE_BASE_URL: str = "https://firebasestorage.googleapis.com/v0/b"
    STORAGE_OP_TIMEOUT_SECONDS: float = 10.0

    # Image upload / derivatives
    MAX_IMAGE_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10 MB
    IMAGE_NAMESPACES: List[str] = ["editor", "original"]
    # 순서가 의미를 가진다: thumbnail < medium < large
    IMAGE_DERIVATIVE_SIZES: Dict[str, int] = {"thumbnail": 300, "medium": 800, "large": 1200}
    IMAGE_OUTPUT_FORMAT: str = "WEBP"
    # 파생 이미지 키는 원본 파일명(확장자 포함)을 그대로 쓰고 내용만 이 형식으로 인코딩한다
    IMAGE_OUTPUT_CONTENT_TYPE: str = "image/webp"
    IMAGE_OUTPUT_QUALITY: int = 80

    # 콘텐츠 수정/삭제 요청 안에서 이미지 정리에 허용하는 최대 시간
    IMAGE_CLEANUP_TIMEOUT_SECONDS: float = 15.0

    def derivative_sizes(self) -> List[Tuple[str, int]]:
        return [(str(name), int(width)) for name, width in self.IMAGE_DERIVATIVE_SIZES.items()]

    def derivative_size_names(self) -> List[str]:
        return [name for name, _ in self.derivative_sizes()]

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
