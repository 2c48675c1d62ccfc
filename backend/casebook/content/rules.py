# backend/casebook/content/rules.py
"""
Blog / CaseStudy 공통 파생 필드 규칙.

- slug: 제목에서 결정적으로 생성 (제목이 바뀔 때마다 재생성)
- read_time: 본문 단어 수 / 200 올림, 최소 1분
- published_at: 처음 published 로 전환될 때 한 번만 기록
"""
import math
import re
import unicodedata
from datetime import datetime, timezone
from typing import Iterable, List, Optional

WORDS_PER_MINUTE = 200
MAX_TAG_LENGTH = 50

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9 -]")
_SPACE_RUN_RE = re.compile(r" +")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")


def slugify(title: str) -> str:
    # 악센트 문자는 ASCII 로 접어서 보존 (Café -> cafe)
    folded = unicodedata.normalize("NFKD", title or "").encode("ascii", "ignore").decode("ascii")
    text = _WHITESPACE_RE.sub(" ", folded.lower())
    text = _DISALLOWED_RE.sub("", text)
    text = _SPACE_RUN_RE.sub("-", text.strip())
    text = _HYPHEN_RUN_RE.sub("-", text)
    return text.strip("-")


def word_count(content: str) -> int:
    return len((content or "").split())


def read_time(content: str) -> int:
    return max(1, math.ceil(word_count(content) / WORDS_PER_MINUTE))


def publish_timestamp(status, current: Optional[datetime], now: Optional[datetime] = None) -> Optional[datetime]:
    """상태가 published 이고 아직 기록이 없을 때만 현재 시각을 돌려줍니다."""
    if current is not None:
        return current
    if status == "published":
        return now or datetime.now(timezone.utc)
    return None


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """공백 제거, 빈 태그와 중복 제거 (입력 순서 유지)"""
    result: List[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result
