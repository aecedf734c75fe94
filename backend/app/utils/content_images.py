"""본문(HTML/Markdown) 속 이미지 참조를 추출하고 스토리지 기준 파일명으로 되돌리는 유틸리티입니다."""

import re
from typing import Iterable, Mapping
from urllib.parse import unquote, urlsplit

from app.config import settings

HTML_IMG_SRC_RE = re.compile(r"""<img[^>]+src=["']([^"']+)["']""", re.IGNORECASE)
MARKDOWN_IMG_RE = re.compile(r"!\[.*?\]\((.*?)\)")

# 공개 URL에서는 경로 구분자가 %2F로 인코딩되어 있다.
_SEP = r"%2[Ff]"
_SIZE_OR_ORIGINAL = ("thumbnail", "medium", "large", "original")


def _alternation(values: Iterable[str]) -> str:
    return "|".join(re.escape(value) for value in values)


def _compile_templates():
    sizes = _alternation(list(dict.fromkeys([*settings.derivative_size_names(), *_SIZE_OR_ORIGINAL])))
    namespaces = _alternation(settings.IMAGE_NAMESPACES)
    return (
        # images/<namespace>/<size-or-original>/<basefilename>
        re.compile(rf"images{_SEP}(?:{namespaces}){_SEP}(?:{sizes}){_SEP}(.+)$"),
        # images/<size-or-original>/<basefilename> (구 경로)
        re.compile(rf"images{_SEP}(?:{sizes}){_SEP}(.+)$"),
        # images/<namespace>/<basefilename> (업로드 원본 위치)
        re.compile(rf"images{_SEP}(?:{namespaces}){_SEP}((?:(?!%2[Ff]).)+)$"),
    )


_TEMPLATES = _compile_templates()


def extract_image_urls(content: str | None) -> list[str]:
    """Return every image URL embedded in ``content``.

    Both ``<img src=...>`` tags and Markdown ``![alt](url)`` images are
    matched without validating the URL. Duplicates are kept and the result
    follows the order of appearance in the document.
    """
    if not content:
        return []
    found: list[tuple[int, str]] = []
    for pattern in (HTML_IMG_SRC_RE, MARKDOWN_IMG_RE):
        for match in pattern.finditer(content):
            found.append((match.start(), match.group(1)))
    found.sort(key=lambda item: item[0])
    return [url for _, url in found]


def collect_image_urls(texts: Iterable[str | None]) -> list[str]:
    # 여러 locale 값의 합집합. 처음 등장한 순서를 유지한다.
    urls: dict[str, None] = {}
    for text in texts:
        for url in extract_image_urls(text):
            urls.setdefault(url, None)
    return list(urls)


def resolve_base_file_name(url: str | None) -> str | None:
    """Map a public image URL back to the base filename shared by its variants.

    Returns ``None`` for URLs that do not point at a known storage location,
    e.g. third-party images. Percent-encoding is reversed exactly once.
    """
    if not url:
        return None
    try:
        path = urlsplit(url.strip()).path
    except ValueError:
        return None
    for template in _TEMPLATES:
        match = template.search(path)
        if match:
            name = unquote(match.group(1))
            return name or None
    return None


def locale_values(*fields) -> list[str]:
    """Flatten localized fields (``{"ko": ..., "en": ...}``), plain strings or lists of them."""
    texts: list[str] = []
    for value in fields:
        if not value:
            continue
        if isinstance(value, str):
            texts.append(value)
        elif isinstance(value, Mapping):
            texts.extend(text for text in value.values() if isinstance(text, str) and text)
        else:
            texts.extend(locale_values(*value))
    return texts
