"""Bulk action 생성 + NDJSON payload 배치

payload 형식 (action 1줄 + document 1줄, 마지막 줄 뒤에도 개행):
    {"index": {"_index": "sales", "_type": "doc"}}
    {"name": "Alice", "age": 30}

flush 기준은 누적 라인 수 (BULK_MAX_LINES). 실제 바이트 수는 계산하지 않음.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence, Union

from .config import BULK_MAX_LINES

RETRY_ON_CONFLICT = 3


@dataclass(frozen=True)
class IndexAction:
    """ID 없이 색인 (클러스터가 ID 부여, 재전송 시 중복 도큐먼트)."""

    index: str
    type: str

    def metadata(self) -> dict:
        return {"index": {"_index": self.index, "_type": self.type}}

    def body(self, doc: dict) -> dict:
        return doc


@dataclass(frozen=True)
class UpdateAction:
    """ID 기반 upsert (재전송해도 안전)."""

    index: str
    type: str
    id: str
    retry_on_conflict: int = RETRY_ON_CONFLICT

    def metadata(self) -> dict:
        return {
            "update": {
                "_index": self.index,
                "_type": self.type,
                "_id": self.id,
                "retry_on_conflict": self.retry_on_conflict,
            }
        }

    def body(self, doc: dict) -> dict:
        return {"doc": doc, "detect_noop": True, "doc_as_upsert": True}


BulkAction = Union[IndexAction, UpdateAction]


def make_action(index: str, doc_type: str, doc_id: str | None = None) -> BulkAction:
    if doc_id is None:
        return IndexAction(index, doc_type)
    return UpdateAction(index, doc_type, doc_id)


def _dumps(value: Any) -> str:
    # 날짜 등 JSON 비호환 셀 값은 문자열로
    return json.dumps(value, ensure_ascii=False, default=str)


def serialize_pair(action: BulkAction, doc: dict) -> tuple[str, str]:
    return _dumps(action.metadata()), _dumps(action.body(doc))


def iter_bulk_payloads(
    pairs: Iterable[tuple[BulkAction, dict]],
    max_lines: int = BULK_MAX_LINES,
) -> Iterator[tuple[str, int]]:
    """
    (action, doc) 쌍 → NDJSON payload 제너레이터.

    누적 라인 수가 max_lines에 도달하면 flush. 남은 부분 배치는 마지막에 flush.

    Yields:
        (payload, doc_count). payload는 "\\n"으로 끝남
    """
    if max_lines < 2 or max_lines % 2:
        raise ValueError(f"max_lines must be an even number >= 2, got {max_lines}")

    lines: list[str] = []
    for action, doc in pairs:
        lines.extend(serialize_pair(action, doc))
        if len(lines) >= max_lines:
            yield "\n".join(lines) + "\n", len(lines) // 2
            lines = []

    if lines:
        yield "\n".join(lines) + "\n", len(lines) // 2


def batch(actions: Sequence[tuple[BulkAction, dict]], max_lines: int = BULK_MAX_LINES) -> list[str]:
    """iter_bulk_payloads의 리스트 버전 (payload만)."""
    return [payload for payload, _ in iter_bulk_payloads(actions, max_lines)]
