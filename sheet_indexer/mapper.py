"""헤더 정리 + 행 → 도큐먼트 매핑"""

from __future__ import annotations

import math
import re
from typing import Any, Sequence

from .errors import ColumnCountMismatchError, EmptyHeaderError, MissingDocumentIdError

_NON_ALNUM = re.compile(r"[^0-9A-Za-z]")
_ALNUM = re.compile(r"[0-9A-Za-z]")


class _EmptyCell:
    """시트의 빈 셀 표식."""

    def __repr__(self) -> str:
        return "EMPTY_CELL"

    def __bool__(self) -> bool:
        return False


EMPTY_CELL = _EmptyCell()


def is_empty_cell(value: Any) -> bool:
    """
    빈 셀 판정: None, "", EMPTY_CELL, NaN.

    0 / False 는 값으로 취급 (truthiness에 의존하지 않음).
    """
    if value is None or value is EMPTY_CELL:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def sanitize_header(raw: Any, column: int) -> str:
    """
    헤더 셀 하나를 도큐먼트 키로 정리.

    [0-9A-Za-z] 외 문자는 "_"로 치환 후 소문자화.
    영숫자가 하나도 없으면 (빈 셀, 기호만 있는 셀) EmptyHeaderError.

    예: "Name!" → "name_", "First Name" → "first_name"
    """
    if is_empty_cell(raw):
        raise EmptyHeaderError(column)
    text = str(raw)
    if not _ALNUM.search(text):
        raise EmptyHeaderError(column)
    return _NON_ALNUM.sub("_", text).lower()


def sanitize_headers(raw_header_row: Sequence[Any]) -> list[str]:
    """헤더 행 전체 정리. 중복 키는 허용 (매핑 시 마지막 컬럼이 우선)."""
    return [sanitize_header(cell, i + 1) for i, cell in enumerate(raw_header_row)]


def check_column_count(headers: Sequence[str], first_row: Sequence[Any]):
    if len(headers) != len(first_row):
        raise ColumnCountMismatchError(len(headers), len(first_row))


def map_row(headers: Sequence[str], row: Sequence[Any]) -> dict[str, Any]:
    """
    한 행 → sparse 도큐먼트. 빈 셀의 키는 아예 포함하지 않음.

    예: headers=["name", "age"], row=["Alice", ""] → {"name": "Alice"}
    """
    doc: dict[str, Any] = {}
    for key, cell in zip(headers, row):
        if not is_empty_cell(cell):
            doc[key] = cell
    return doc


def resolve_doc_ids(id_cells: Sequence[Any], row_count: int) -> list[str]:
    """
    문서 ID 컬럼 검증. 모든 데이터 행에 ID가 있어야 함.

    Raises:
        MissingDocumentIdError: 첫 번째로 비어 있는 행 (1부터)
    """
    ids: list[str] = []
    for i in range(row_count):
        cell = id_cells[i] if i < len(id_cells) else None
        if is_empty_cell(cell):
            raise MissingDocumentIdError(i + 1)
        ids.append(str(cell))
    return ids
