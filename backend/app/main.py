"""FastAPI 애플리케이션 진입점. 미들웨어와 API 라우터를 등록합니다."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import events, faqs, images, notices, pages, storage_events

app = FastAPI(
    title="CMS 콘텐츠 관리 백엔드",
    description="다국어 본문(FAQ/페이지/공지/이벤트)과 본문 이미지의 파생본 생성·정리를 담당하는 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(faqs.router)
app.include_router(pages.router)
app.include_router(notices.router)
app.include_router(events.router)
app.include_router(images.router)
app.include_router(storage_events.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "CMS 콘텐츠 관리 백엔드"}
