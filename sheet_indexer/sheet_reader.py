"""시트 파일(CSV/Parquet) → 셀 행렬

스프레드시트 UI의 범위 선택 대신, 파일 전체를 이미 해석된 셀 행렬로 읽습니다.
  - CSV:     첫 행이 그대로 헤더 행 (컬럼명 자동 생성 후 데이터로 읽음). 모든 셀은 문자열
  - Parquet: 컬럼명이 헤더 행. null 셀은 None
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.csv as pacsv
import pyarrow.parquet as pq

from .errors import InvalidConfigError
from .log import get_logger

logger = get_logger("sheet_reader")

SUPPORTED_SUFFIXES = (".csv", ".parquet")


@dataclass
class SheetData:
    header: list[Any]
    rows: list[list[Any]]
    doc_ids: list[Any] | None
    source: str


def _table_rows(table: pa.Table) -> list[list[Any]]:
    columns = [column.to_pylist() for column in table.columns]
    return [list(row) for row in zip(*columns)]


def _read_csv(path: Path) -> pa.Table:
    """모든 컬럼을 문자열로 읽기. 헤더 행도 데이터 행처럼 타입 추론 없이 원문 유지."""
    read_options = pacsv.ReadOptions(autogenerate_column_names=True)
    with open(path, "rb") as f:
        names = pacsv.open_csv(f, read_options=read_options).schema.names
    convert_options = pacsv.ConvertOptions(column_types={name: pa.string() for name in names})
    return pacsv.read_csv(path, read_options=read_options, convert_options=convert_options)


def read_cell_matrix(path: Path) -> list[list[Any]]:
    """
    파일 → 행 리스트 (헤더 행 포함).

    CSV 셀은 모두 문자열 (빈 셀은 ""), Parquet 셀은 컬럼 타입 그대로.

    Raises:
        InvalidConfigError: 파일 없음 / 지원하지 않는 확장자 / 파싱 실패
    """
    path = Path(path)
    if not path.exists():
        raise InvalidConfigError(f"Sheet file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise InvalidConfigError(
            f"Unsupported sheet file: {path.name} (supported: {', '.join(SUPPORTED_SUFFIXES)})"
        )

    try:
        if suffix == ".csv":
            return _table_rows(_read_csv(path))
        table = pq.read_table(path)
    except pa.ArrowException as e:
        logger.warning(f"[red]시트 파싱 실패[/red] {path.name}: {type(e).__name__}: {e}")
        raise InvalidConfigError(f"Can't read sheet file {path.name}: {e}") from None
    return [list(table.column_names)] + _table_rows(table)


def _find_column(header: list[Any], column: str) -> int:
    """헤더 라벨 또는 1부터 시작하는 컬럼 번호 → 0부터 시작하는 인덱스."""
    if column.isdigit():
        idx = int(column) - 1
        if not 0 <= idx < len(header):
            raise InvalidConfigError(
                f"Document id column {column} is out of range (1..{len(header)})."
            )
        return idx

    labels = ["" if cell is None else str(cell) for cell in header]
    if column in labels:
        return labels.index(column)
    raise InvalidConfigError(
        f"Document id column '{column}' not found. Available: {', '.join(labels)}"
    )


def load_sheet(
    path: Path,
    header_row: int = 1,
    doc_id_column: str | None = None,
    limit: int = 0,
) -> SheetData:
    """
    시트 파일 로드 → 헤더 행 + 데이터 행 (+ 문서 ID 컬럼).

    Args:
        path:          CSV 또는 Parquet 파일
        header_row:    헤더 행 번호 (1부터). 그 아래 행이 모두 데이터
        doc_id_column: 문서 ID 컬럼 (헤더 라벨 또는 컬럼 번호). None이면 ID 없음
        limit:         데이터 행 최대 수 (0=전체)
    """
    matrix = read_cell_matrix(path)
    if header_row < 1 or header_row > len(matrix):
        raise InvalidConfigError(
            f"Header row {header_row} is out of range (sheet has {len(matrix)} rows)."
        )

    header = matrix[header_row - 1]
    rows = matrix[header_row:]
    if limit > 0:
        rows = rows[:limit]

    doc_ids = None
    if doc_id_column:
        idx = _find_column(header, doc_id_column)
        doc_ids = [row[idx] if idx < len(row) else None for row in rows]

    source = f"{Path(path).suffix.lstrip('.').upper()}: {Path(path).name}"
    logger.info(
        f"시트 로드: [cyan]{Path(path).name}[/cyan] "
        f"({len(header)}컬럼, {len(rows):,}행"
        + (f", id={doc_id_column}" if doc_id_column else "")
        + ")"
    )
    return SheetData(header=header, rows=rows, doc_ids=doc_ids, source=source)
