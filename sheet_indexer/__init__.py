"""
sheet_indexer: 스프레드시트 행 → Elasticsearch 벌크 인덱싱

Push (헤더 정리 → 도큐먼트 매핑 → 2000줄 배치 → _bulk 전송):
    from sheet_indexer import ConnectionConfig, push_data
    conn = ConnectionConfig(host="es.example.com", port=9200, username="elastic", password="pw")
    result = push_data(conn, "sales", "doc", ["Name", "Age"], [["Alice", 30], ["Bob", ""]])
    result.search_url  # http://es.example.com:9200/sales/doc/_search

CLI 래퍼 (설정 저장소 + CSV/Parquet 시트):
    from sheet_indexer import Config, run_push
    run_push(Config(sheet_path=Path("sales.csv"), index_name="sales", template_name="sales_tpl"))

연결 확인:
    from sheet_indexer import ClusterClient
    with ClusterClient(conn) as client:
        client.check_connection()
"""

from .batcher import IndexAction, UpdateAction, batch, iter_bulk_payloads, make_action
from .client import ClusterClient
from .config import BULK_MAX_LINES, Config, ConnectionConfig, validate_connection
from .errors import (
    BulkSubmitError,
    ClusterConnectionError,
    ColumnCountMismatchError,
    EmptyHeaderError,
    InvalidConfigError,
    MissingDocumentIdError,
    NoDataError,
    SheetIndexerError,
    TemplateError,
)
from .log import get_logger, setup_logging, setup_run_logging
from .mapper import EMPTY_CELL, is_empty_cell, map_row, resolve_doc_ids, sanitize_headers
from .pipeline import PushResult, push_data, run_check, run_configure, run_push
from .settings import SettingsStore
from .sheet_reader import SheetData, load_sheet, read_cell_matrix
from .template import default_template, ensure_template

__all__ = [
    # Config
    "Config", "ConnectionConfig", "validate_connection", "BULK_MAX_LINES",
    "SettingsStore",
    # Mapping
    "sanitize_headers", "map_row", "resolve_doc_ids", "is_empty_cell", "EMPTY_CELL",
    # Bulk
    "IndexAction", "UpdateAction", "make_action", "iter_bulk_payloads", "batch",
    # Cluster
    "ClusterClient", "default_template", "ensure_template",
    # Pipeline
    "push_data", "PushResult", "run_push", "run_check", "run_configure",
    # Input
    "SheetData", "load_sheet", "read_cell_matrix",
    # Logging
    "setup_logging", "setup_run_logging", "get_logger",
    # Errors
    "SheetIndexerError", "InvalidConfigError", "EmptyHeaderError",
    "ColumnCountMismatchError", "ClusterConnectionError", "TemplateError",
    "BulkSubmitError", "NoDataError", "MissingDocumentIdError",
]
