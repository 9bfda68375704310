#!/usr/bin/env python3
# index_sheet_to_es.py
"""
시트(CSV/Parquet) → Elasticsearch 벌크 인덱싱 (CLI 엔트리포인트)

실행:
  # 연결 정보 저장 (~/.sheet_indexer/settings.json)
  python index_sheet_to_es.py --mode configure --host es.example.com --port 9243 \\
      --use_ssl --username elastic --password changeme

  # 연결 확인 (성공 시 was_checked 기록)
  python index_sheet_to_es.py --mode check

  # 푸시 (자동 ID)
  python index_sheet_to_es.py --sheet data/sales.csv --index sales --type doc

  # 푸시 (ID 컬럼 기반 upsert + 템플릿)
  python index_sheet_to_es.py --sheet data/sales.parquet --index sales \\
      --doc_id_column order_id --template sales_tpl
"""

import argparse
import sys
from pathlib import Path

from sheet_indexer import (
    Config,
    ConnectionConfig,
    SheetIndexerError,
    get_logger,
    run_check,
    run_configure,
    run_push,
)
from sheet_indexer.config import DEFAULT_INDEX_TYPE, DEFAULT_SETTINGS_PATH

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="시트 → Elasticsearch (_bulk, 동기)"
    )
    parser.add_argument(
        "--mode", choices=["push", "check", "configure"], default="push",
        help="push=벌크 인덱싱, check=연결 확인, configure=연결 정보 저장",
    )
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS_PATH, help="설정 파일 경로")
    parser.add_argument("--log_dir", type=Path, default=None, help="로그 파일 디렉토리 (미지정 시 콘솔만)")

    # ── 데이터 소스 ──
    data = parser.add_argument_group("데이터 소스")
    data.add_argument("--sheet", type=Path, default=None, help="CSV 또는 Parquet 파일")
    data.add_argument("--header_row", type=int, default=1, help="헤더 행 번호 (1부터)")
    data.add_argument("--doc_id_column", default=None, help="문서 ID 컬럼 (헤더 라벨 또는 컬럼 번호)")
    data.add_argument("--limit", type=int, default=0, help="0=전체")

    # ── 인덱스 ──
    index = parser.add_argument_group("인덱스")
    index.add_argument("--index", default="", help="대상 인덱스 이름")
    index.add_argument("--type", default=DEFAULT_INDEX_TYPE, help="도큐먼트 타입")
    index.add_argument("--template", default=None, help="템플릿 이름 (없으면 기본 템플릿 생성)")

    # ── 클러스터 연결 (push/check 시 저장값 덮어쓰기) ──
    cluster = parser.add_argument_group("클러스터 연결")
    cluster.add_argument("--host", default=None)
    cluster.add_argument("--port", type=int, default=None)
    ssl = cluster.add_mutually_exclusive_group()
    ssl.add_argument("--use_ssl", dest="use_ssl", action="store_true", default=None, help="https 사용")
    ssl.add_argument("--no_use_ssl", dest="use_ssl", action="store_false", default=None,
                     help="저장된 use_ssl=true를 이번 실행만 http로")
    cluster.add_argument("--username", default=None, help="Basic Auth 사용자명")
    cluster.add_argument("--password", default=None, help="Basic Auth 비밀번호")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "host": args.host,
        "port": args.port,
        "use_ssl": args.use_ssl,
        "username": args.username,
        "password": args.password,
    }
    config = Config(
        sheet_path=args.sheet,
        header_row=args.header_row,
        doc_id_column=args.doc_id_column,
        limit=args.limit,
        index_name=args.index,
        index_type=args.type,
        template_name=args.template,
        settings_path=args.settings,
        connection_overrides=overrides,
        log_dir=args.log_dir,
    )

    try:
        if args.mode == "configure":
            run_configure(
                ConnectionConfig(
                    host=args.host or "",
                    port=args.port if args.port is not None else 9200,
                    use_ssl=bool(args.use_ssl),
                    username=args.username,
                    password=args.password,
                ),
                args.settings,
            )
        elif args.mode == "check":
            run_check(config)
        else:
            run_push(config)
    except SheetIndexerError as e:
        logger.error(f"[bold red]{type(e).__name__}[/bold red]: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
