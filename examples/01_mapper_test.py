#!/usr/bin/env python3
"""
mapper 예시: 헤더 정리 + 행 → 도큐먼트 매핑

테스트 항목:
  1. sanitize_headers: 치환/소문자화, 빈 헤더 거부
  2. check_column_count: 헤더/데이터 폭 불일치
  3. is_empty_cell: 빈 셀 판정 (0/False는 값)
  4. map_row: sparse 도큐먼트, 중복 키는 마지막 컬럼 우선
  5. resolve_doc_ids: 행 번호(1부터) 포함 에러
"""

import re

from sheet_indexer import (
    EMPTY_CELL,
    ColumnCountMismatchError,
    EmptyHeaderError,
    InvalidConfigError,
    MissingDocumentIdError,
    is_empty_cell,
    map_row,
    resolve_doc_ids,
    sanitize_headers,
)
from sheet_indexer.mapper import check_column_count, sanitize_header


def test_sanitize_headers():
    """sanitize_headers: [0-9A-Za-z] 외 → "_", 소문자화"""
    print("=" * 60)
    print("[1] sanitize_headers")
    print("=" * 60)

    assert sanitize_headers(["Name!", "Age"]) == ["name_", "age"]
    assert sanitize_headers(["First Name", "E-Mail", "Zip Code 2"]) == [
        "first_name", "e_mail", "zip_code_2",
    ]
    assert sanitize_headers([2020, "Café"]) == ["2020", "caf_"]
    print(f"  'Name!' → 'name_', 'First Name' → 'first_name'  OK")

    pattern = re.compile(r"^[0-9a-z_]+$")
    for raw in ["ABC", "a.b.c", "  x  ", "日本 Tokyo", "Q1/Q2"]:
        key = sanitize_header(raw, 1)
        assert pattern.match(key), key
        assert key == key.lower()
    print(f"  출력 패턴 ^[0-9a-z_]+$  OK")

    # 빈 셀 / 기호만 있는 셀 → 실패 (컬럼 번호 1부터)
    for bad in ["", None, "!!!", "   ", "日本"]:
        try:
            sanitize_headers(["ok", bad])
            assert False, f"Should have raised for {bad!r}"
        except EmptyHeaderError as e:
            assert e.column == 2
            assert isinstance(e, InvalidConfigError)
    print(f"  빈/기호 헤더 거부 (column=2)  OK")

    print("  PASS\n")


def test_check_column_count():
    print("=" * 60)
    print("[2] check_column_count")
    print("=" * 60)

    check_column_count(["a", "b"], ["1", "2"])
    try:
        check_column_count(["a", "b", "c"], ["1", "2"])
        assert False, "Should have raised"
    except ColumnCountMismatchError as e:
        assert e.header_count == 3
        assert e.row_count == 2
        assert "3" in str(e) and "2" in str(e)
    print(f"  3 vs 2 컬럼 → ColumnCountMismatchError  OK")

    print("  PASS\n")


def test_is_empty_cell():
    print("=" * 60)
    print("[3] is_empty_cell")
    print("=" * 60)

    for empty in [None, "", EMPTY_CELL, float("nan")]:
        assert is_empty_cell(empty), repr(empty)
    for value in [0, 0.0, False, " ", "0", "x", [], 12.5]:
        assert not is_empty_cell(value), repr(value)
    print(f"  None/''/EMPTY_CELL/NaN → 빈 셀, 0/False/' ' → 값  OK")

    print("  PASS\n")


def test_map_row():
    """map_row: 빈 셀의 키는 생략"""
    print("=" * 60)
    print("[4] map_row")
    print("=" * 60)

    assert map_row(["name", "age"], ["Alice", ""]) == {"name": "Alice"}
    assert map_row(["name", "age"], ["", None]) == {}
    assert map_row(["qty", "flag"], [0, False]) == {"qty": 0, "flag": False}
    print(f"  ['Alice', ''] → {{'name': 'Alice'}}  OK")

    # 키 집합 = 셀이 비어 있지 않은 헤더
    headers = ["a", "b", "c", "d"]
    row = ["x", None, 3, ""]
    doc = map_row(headers, row)
    assert set(doc) == {h for h, cell in zip(headers, row) if not is_empty_cell(cell)}
    assert None not in doc.values() and "" not in doc.values()

    # 중복 헤더 → 마지막 컬럼 값
    assert map_row(["id", "id"], ["first", "second"]) == {"id": "second"}
    assert map_row(["id", "id"], ["first", ""]) == {"id": "first"}
    print(f"  중복 헤더: 마지막 컬럼 우선  OK")

    # 행이 헤더보다 짧음
    assert map_row(["a", "b", "c"], ["1"]) == {"a": "1"}
    print(f"  짧은 행: 남은 컬럼 생략  OK")

    print("  PASS\n")


def test_resolve_doc_ids():
    print("=" * 60)
    print("[5] resolve_doc_ids")
    print("=" * 60)

    assert resolve_doc_ids(["a1", 42, "c3"], 3) == ["a1", "42", "c3"]
    print(f"  ['a1', 42, 'c3'] → 문자열 ID  OK")

    try:
        resolve_doc_ids(["a1", "", "c3"], 3)
        assert False, "Should have raised"
    except MissingDocumentIdError as e:
        assert e.row == 2
        assert "row 2" in str(e)
    print(f"  2행 빈 ID → MissingDocumentIdError(row=2)  OK")

    # ID 셀이 데이터보다 적음
    try:
        resolve_doc_ids(["a1"], 2)
        assert False, "Should have raised"
    except MissingDocumentIdError as e:
        assert e.row == 2
    print(f"  ID 부족 → row=2  OK")

    print("  PASS\n")


if __name__ == "__main__":
    test_sanitize_headers()
    test_check_column_count()
    test_is_empty_cell()
    test_map_row()
    test_resolve_doc_ids()

    print("=" * 60)
    print("ALL mapper EXAMPLES PASSED")
    print("=" * 60)
