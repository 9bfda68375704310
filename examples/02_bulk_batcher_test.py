#!/usr/bin/env python3
"""
batcher 예시: Bulk action + NDJSON payload 배치

테스트 항목:
  1. IndexAction / UpdateAction: metadata + body 형식
  2. iter_bulk_payloads: 2줄/쌍, 마지막 개행
  3. flush 기준: 2000줄 (1000쌍) 이하, 남은 배치 flush
  4. 1500행 → 2000줄 + 1000줄 두 payload
  5. JSON 비호환 값 (date) + 비 ASCII 문자열
"""

import datetime
import json

from sheet_indexer import (
    BULK_MAX_LINES,
    IndexAction,
    UpdateAction,
    batch,
    iter_bulk_payloads,
    make_action,
)


def _pairs(n: int, doc_id: bool = False):
    return [
        (make_action("sales", "doc", f"id{i}" if doc_id else None), {"n": i})
        for i in range(n)
    ]


def test_actions():
    print("=" * 60)
    print("[1] IndexAction / UpdateAction")
    print("=" * 60)

    index = make_action("sales", "doc")
    assert isinstance(index, IndexAction)
    assert index.metadata() == {"index": {"_index": "sales", "_type": "doc"}}
    assert index.body({"a": 1}) == {"a": 1}
    print(f"  index: {index.metadata()}  OK")

    update = make_action("sales", "doc", "42")
    assert isinstance(update, UpdateAction)
    assert update.metadata() == {
        "update": {"_index": "sales", "_type": "doc", "_id": "42", "retry_on_conflict": 3}
    }
    assert update.body({"a": 1}) == {"doc": {"a": 1}, "detect_noop": True, "doc_as_upsert": True}
    print(f"  update: retry_on_conflict=3, detect_noop, doc_as_upsert  OK")

    print("  PASS\n")


def test_payload_format():
    print("=" * 60)
    print("[2] payload 형식")
    print("=" * 60)

    payloads = list(iter_bulk_payloads(_pairs(2, doc_id=True)))
    assert len(payloads) == 1
    payload, count = payloads[0]
    assert count == 2
    assert payload.endswith("\n")
    lines = payload.rstrip("\n").split("\n")
    assert len(lines) == 4
    assert json.loads(lines[0])["update"]["_id"] == "id0"
    assert json.loads(lines[1]) == {"doc": {"n": 0}, "detect_noop": True, "doc_as_upsert": True}
    assert json.loads(lines[2])["update"]["_id"] == "id1"
    print(f"  2쌍 → 4줄 + 마지막 개행  OK")

    assert list(iter_bulk_payloads([])) == []
    print(f"  빈 입력 → payload 없음  OK")

    print("  PASS\n")


def test_flush_ceiling():
    """flush 기준: 누적 라인 수가 max_lines에 도달하면 flush"""
    print("=" * 60)
    print("[3] flush 기준 (2000줄)")
    print("=" * 60)

    assert BULK_MAX_LINES == 2000

    payloads = list(iter_bulk_payloads(_pairs(2500)))
    line_counts = [p.count("\n") for p, _ in payloads]
    assert line_counts == [2000, 2000, 1000]
    assert [c for _, c in payloads] == [1000, 1000, 500]
    assert all(n <= BULK_MAX_LINES for n in line_counts)
    print(f"  2500쌍 → 라인 {line_counts}  OK")

    # 정확히 1000쌍 → payload 1개 (빈 꼬리 payload 없음)
    payloads = list(iter_bulk_payloads(_pairs(1000)))
    assert len(payloads) == 1
    assert payloads[0][1] == 1000
    print(f"  1000쌍 → payload 1개  OK")

    # 작은 max_lines
    payloads = list(iter_bulk_payloads(_pairs(5), max_lines=4))
    assert [c for _, c in payloads] == [2, 2, 1]
    print(f"  max_lines=4, 5쌍 → [2, 2, 1]  OK")

    for bad in (0, 1, 3):
        try:
            list(iter_bulk_payloads(_pairs(1), max_lines=bad))
            assert False, "Should have raised"
        except ValueError:
            pass
    print(f"  홀수/2 미만 max_lines → ValueError  OK")

    print("  PASS\n")


def test_1500_rows():
    print("=" * 60)
    print("[4] 1500행 (ID 없음)")
    print("=" * 60)

    payloads = batch(_pairs(1500))
    assert len(payloads) == 2
    assert payloads[0].count("\n") == 2000
    assert payloads[1].count("\n") == 1000
    total_lines = sum(p.count("\n") for p in payloads)
    assert total_lines == 3000
    first = json.loads(payloads[0].split("\n")[0])
    assert first == {"index": {"_index": "sales", "_type": "doc"}}
    print(f"  3000줄 → 2000 + 1000  OK")

    print("  PASS\n")


def test_serialization():
    print("=" * 60)
    print("[5] 직렬화 (date, 비 ASCII)")
    print("=" * 60)

    doc = {"day": datetime.date(2024, 3, 1), "city": "東京"}
    payload, _ = next(iter_bulk_payloads([(make_action("i", "t"), doc)]))
    assert "東京" in payload
    body = json.loads(payload.split("\n")[1])
    assert body == {"day": "2024-03-01", "city": "東京"}
    print(f"  date → '2024-03-01', ensure_ascii=False  OK")

    print("  PASS\n")


if __name__ == "__main__":
    test_actions()
    test_payload_format()
    test_flush_ceiling()
    test_1500_rows()
    test_serialization()

    print("=" * 60)
    print("ALL batcher EXAMPLES PASSED")
    print("=" * 60)
