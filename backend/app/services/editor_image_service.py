"""Editor Image Service 도메인 서비스 레이어입니다. 전체 콘텐츠 참조 기준으로 고아 이미지 묶음을 찾아 정리합니다."""

import asyncio

from sqlalchemy.orm import Session

from app.config import settings
from app.services.content_kinds import CONTENT_KINDS
from app.services.derivative_store import DerivativeStore, split_original_key
from app.services.object_store import ObjectStore
from app.utils.content_images import resolve_base_file_name


def collect_referenced_base_names(db: Session) -> set[str]:
    referenced: set[str] = set()
    for kind in CONTENT_KINDS.values():
        for record in db.query(kind.model).all():
            for url in kind.referenced_image_urls(record):
                name = resolve_base_file_name(url)
                if name:
                    referenced.add(name)
    return referenced


async def collect_stored_base_names(store: ObjectStore) -> set[str]:
    existing: set[str] = set()
    for namespace in settings.IMAGE_NAMESPACES:
        for key in await store.list(f"images/{namespace}/"):
            ns, name = split_original_key(key)
            if ns == namespace and name:
                existing.add(name)
    return existing


async def _delete_orphans(store: ObjectStore, base_names: list[str]) -> int:
    derivatives = DerivativeStore(store)
    reports = await asyncio.gather(
        *(derivatives.delete_all(name, context="Orphan Cleanup") for name in base_names)
    )
    return sum(1 for report in reports if report.ok)


def cleanup_orphan_images(db: Session, store: ObjectStore, dry_run: bool = True):
    referenced = collect_referenced_base_names(db)
    existing = asyncio.run(collect_stored_base_names(store))
    orphan_names = sorted(existing - referenced)

    deleted_count = 0
    if not dry_run and orphan_names:
        deleted_count = asyncio.run(_delete_orphans(store, orphan_names))

    return {
        "dry_run": dry_run,
        "referenced_count": len(referenced),
        "existing_count": len(existing),
        "orphan_count": len(orphan_names),
        "deleted_count": deleted_count,
        "orphan_base_names": orphan_names,
    }
