"""시트 → Elasticsearch 벌크 인덱싱 파이프라인 (동기, 단일 스레드)

흐름:
    입력 검증 → 헤더 정리 → 문서 ID 확인 → 템플릿 프로비저닝
    → 행 매핑 → 배치 flush + _bulk 전송 → 검색 URL 반환

실패 시 즉시 중단. 이미 전송된 배치는 클러스터에 남음 (롤백 없음).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from .batcher import BulkAction, iter_bulk_payloads, make_action
from .client import ClusterClient
from .config import (
    BULK_MAX_LINES,
    Config,
    ConnectionConfig,
    validate_connection,
    validate_name,
)
from .errors import InvalidConfigError, NoDataError
from .log import get_logger, setup_logging, setup_run_logging
from .mapper import check_column_count, map_row, resolve_doc_ids, sanitize_headers
from .settings import SettingsStore
from .sheet_reader import load_sheet
from .template import ensure_template

console = Console()
logger = get_logger("pipeline")


@dataclass
class PushResult:
    search_url: str
    docs_sent: int = 0
    rows_skipped: int = 0   # 모든 셀이 빈 행
    batches: int = 0
    template_created: bool = False
    wall_sec: float = 0.0


def search_url(connection: ConnectionConfig, index_name: str, index_type: str) -> str:
    return f"{connection.base_url}/{index_name}/{index_type}/_search"


def _iter_pairs(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    ids: list[str] | None,
    index_name: str,
    index_type: str,
    result: PushResult,
) -> Iterator[tuple[BulkAction, dict]]:
    for i, row in enumerate(rows):
        doc = map_row(headers, row)
        if not doc:
            result.rows_skipped += 1
            continue
        yield make_action(index_name, index_type, ids[i] if ids else None), doc


def push_data(
    connection: ConnectionConfig,
    index_name: str,
    index_type: str,
    header: Sequence[Any],
    rows: Sequence[Sequence[Any]],
    *,
    doc_ids: Sequence[Any] | None = None,
    template_name: str | None = None,
    client: ClusterClient | None = None,
    max_lines: int = BULK_MAX_LINES,
    on_batch: Callable[[int, float], None] | None = None,
) -> PushResult:
    """
    헤더 + 데이터 행을 클러스터에 벌크 인덱싱.

    Args:
        connection:    클러스터 연결 정보
        index_name:    대상 인덱스 (공백 불가)
        index_type:    도큐먼트 타입 (공백 불가)
        header:        헤더 행 원본 셀
        rows:          데이터 행 (셀 리스트)
        doc_ids:       행별 문서 ID 셀. 지정 시 모든 action이 upsert
        template_name: 지정 시 템플릿이 없으면 기본 템플릿 생성
        client:        재사용할 ClusterClient (None이면 생성 후 종료 시 close)
        max_lines:     배치 flush 기준 라인 수
        on_batch:      배치 전송 성공마다 (doc_count, bulk_ms) 콜백

    Returns:
        PushResult (search_url = scheme://host:port/index/type/_search)

    Raises:
        InvalidConfigError: 입력 오류 (네트워크 호출 전)
        MissingDocumentIdError: ID 컬럼에 빈 셀 (전송 전)
        TemplateError / BulkSubmitError: 클러스터 호출 실패
        NoDataError: 전송된 도큐먼트가 0건
    """
    # 입력 검증 (네트워크 호출 전)
    validate_connection(connection)
    validate_name(index_name, "Index name")
    validate_name(index_type, "Index type")
    validate_name(template_name, "Template name", required=False)
    if not header:
        raise InvalidConfigError("Header row is required.")
    if rows is None:
        raise InvalidConfigError("Data rows are required.")

    start = time.perf_counter()
    result = PushResult(search_url=search_url(connection, index_name, index_type))

    # [1/4] 헤더 정리
    headers = sanitize_headers(header)
    if rows:
        check_column_count(headers, rows[0])
    logger.info(f"[1/4] 헤더 {len(headers)}개: {', '.join(headers)}")

    # [2/4] 문서 ID
    ids = resolve_doc_ids(doc_ids, len(rows)) if doc_ids is not None else None
    mode = "upsert (id)" if ids is not None else "index (auto id)"
    logger.info(f"[2/4] 모드: {mode}, 데이터 {len(rows):,}행")

    owns_client = client is None
    if owns_client:
        client = ClusterClient(connection)
    try:
        # [3/4] 템플릿
        if template_name:
            logger.info(f"[3/4] 템플릿 확인: {template_name}")
            result.template_created = ensure_template(client, index_name, template_name)
        else:
            logger.info("[3/4] 템플릿 생략")

        # [4/4] 배치 전송
        logger.info(f"[4/4] 벌크 전송 → {connection.base_url} (index={index_name}, max_lines={max_lines})")
        pairs = _iter_pairs(headers, rows, ids, index_name, index_type, result)
        for payload, doc_count in iter_bulk_payloads(pairs, max_lines):
            t0 = time.perf_counter()
            client.submit_bulk(payload)
            bulk_ms = (time.perf_counter() - t0) * 1000
            result.batches += 1
            result.docs_sent += doc_count
            logger.info(
                f"batch {result.batches}: {doc_count:,}건  bulk={bulk_ms:.0f}ms  "
                f"누적={result.docs_sent:,}"
            )
            if on_batch:
                on_batch(doc_count, bulk_ms)
    finally:
        if owns_client:
            client.close()

    result.wall_sec = time.perf_counter() - start
    if result.docs_sent == 0:
        raise NoDataError(
            "No data was sent: every row was empty. Check the header and data ranges."
        )

    logger.info(f"[bold green]완료[/bold green] {result.docs_sent:,}건 → {result.search_url}")
    return result


# ============================================================
# 진행 표시 + 요약
# ============================================================
def _create_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        "[progress.description]{task.description}",
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        TextColumn("•"),
        TextColumn("[yellow]bulk={task.fields[last_bulk]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def _summary_table(title: str, rows: list[tuple[str, str]]) -> Table:
    table = Table(title=title, show_header=False, border_style="dim")
    table.add_column("항목", style="bold")
    table.add_column("값", justify="right", style="cyan")
    for label, value in rows:
        table.add_row(label, value)
    return table


def _build_summary_rows(result: PushResult, source: str) -> list[tuple[str, str]]:
    rows = [
        ("소스", source),
        ("전송 도큐먼트", f"{result.docs_sent:,}"),
        ("배치 수", f"{result.batches}"),
        ("Wall time", f"{result.wall_sec:.1f}초"),
        ("검색 URL", result.search_url),
    ]
    if result.rows_skipped:
        rows.insert(2, ("빈 행 (생략)", f"{result.rows_skipped:,}"))
    if result.template_created:
        rows.append(("템플릿", "신규 생성"))
    return rows


# ============================================================
# Public API (CLI 래퍼)
# ============================================================
def run_push(config: Config) -> PushResult:
    """설정 저장소 + 시트 파일로 push_data 실행, 요약 테이블 출력."""
    setup_run_logging(config.log_dir, "push")
    console.print(
        Panel.fit(
            f"[bold]Push[/]: {config.sheet_path} → {config.index_name}/{config.index_type}",
            border_style="green",
        )
    )

    if config.sheet_path is None:
        raise InvalidConfigError("A sheet file is required.")

    store = SettingsStore(config.settings_path)
    connection = store.connection(config.connection_overrides)
    if not store.was_checked:
        logger.warning(
            "[yellow]연결 확인 전 설정입니다[/yellow]: --mode check 로 먼저 확인하세요"
        )

    sheet = load_sheet(
        config.sheet_path,
        header_row=config.header_row,
        doc_id_column=config.doc_id_column,
        limit=config.limit,
    )

    progress = _create_progress()
    with progress:
        task_id = progress.add_task("Pushing", total=len(sheet.rows), last_bulk="--")

        def on_batch(doc_count: int, bulk_ms: float):
            progress.update(task_id, advance=doc_count, last_bulk=f"{bulk_ms:.0f}ms")

        result = push_data(
            connection,
            config.index_name,
            config.index_type,
            sheet.header,
            sheet.rows,
            doc_ids=sheet.doc_ids,
            template_name=config.template_name,
            max_lines=config.bulk_max_lines,
            on_batch=on_batch,
        )

    rows = _build_summary_rows(result, sheet.source)
    console.print(_summary_table("결과 요약", rows))
    for label, value in rows:
        logger.info(f"{label}: {value}")
    return result


def run_check(config: Config) -> dict:
    """연결 확인. 저장된 설정 그대로 성공하면 was_checked 기록."""
    setup_run_logging(config.log_dir, "check")
    store = SettingsStore(config.settings_path)
    connection = store.connection(config.connection_overrides)
    validate_connection(connection)

    with ClusterClient(connection) as client:
        info = client.check_connection()

    overridden = any(v is not None for v in config.connection_overrides.values())
    if not overridden:
        store.mark_checked()
    console.print(
        _summary_table(
            "클러스터",
            [
                ("URL", connection.base_url),
                ("cluster_name", str(info.get("cluster_name", "-"))),
                ("version", str(info.get("version", {}).get("number", "-"))),
            ],
        )
    )
    return info


def run_configure(connection: ConnectionConfig, settings_path: Path) -> SettingsStore:
    """연결 정보 검증 후 저장 (was_checked=false)."""
    setup_logging()
    validate_connection(connection)
    store = SettingsStore(settings_path)
    store.save(connection, was_checked=False)
    return store
