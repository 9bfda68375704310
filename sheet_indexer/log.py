"""
sheet_indexer 로깅 (Rich console + 실행별 plain-text 로그 파일)

  - Console: RichHandler 1개 (markup 지원, 프로세스당 1회)
  - File:    실행(push/check)마다 {prefix}_{YYYYmmdd_HHMMSS}.log 하나.
             새 실행이 시작되면 이전 실행의 FileHandler는 닫고 교체
             (markup 제거)

사용법:
    logger = get_logger("pipeline")     # sheet_indexer.pipeline
    log_file = setup_run_logging(Path("logs"), "push")
    logger.info("[bold green]완료[/bold green]")   # 파일에는 "완료"
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from rich.errors import MarkupError
from rich.logging import RichHandler
from rich.text import Text

PKG = "sheet_indexer"
FILE_FORMAT = "%(asctime)s  %(levelname)-7s  %(name)s  %(message)s"


class _MarkupStripFormatter(logging.Formatter):
    """파일 로그용: "[red]전송 실패[/red]" → "전송 실패". 파싱 불가한 메시지는 원문."""

    def format(self, record: logging.LogRecord) -> str:
        msg = record.msg
        try:
            record.msg = Text.from_markup(str(msg)).plain
        except MarkupError:
            pass
        try:
            return super().format(record)
        finally:
            record.msg = msg


def _package_logger(level: int) -> logging.Logger:
    logger = logging.getLogger(PKG)
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        console = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            log_time_format="[%H:%M:%S]",
        )
        console.setLevel(level)
        logger.addHandler(console)
    return logger


def _replace_file_handler(logger: logging.Logger, log_file: Path, level: int):
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setFormatter(_MarkupStripFormatter(FILE_FORMAT))
    fh.setLevel(level)
    logger.addHandler(fh)


def setup_logging(log_file: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    패키지 로거 설정. log_file이 주어지면 기존 로그 파일 핸들러를 교체.

    Returns:
        패키지 루트 로거 ("sheet_indexer")
    """
    logger = _package_logger(level)
    if log_file:
        _replace_file_handler(logger, Path(log_file), level)
    return logger


def run_log_path(log_dir: Path | None, prefix: str) -> Path | None:
    """실행별 로그 파일 경로. log_dir이 없으면 None (콘솔만)."""
    if not log_dir:
        return None
    return Path(log_dir) / f"{prefix}_{time.strftime('%Y%m%d_%H%M%S')}.log"


def setup_run_logging(
    log_dir: Path | None, prefix: str, level: int = logging.INFO
) -> Path | None:
    """push/check 실행 시작 시 호출. 생성된 로그 파일 경로 반환."""
    log_file = run_log_path(log_dir, prefix)
    logger = setup_logging(log_file, level)
    if log_file:
        logger.info(f"Log → {log_file}")
    return log_file


def get_logger(name: str | None = None) -> logging.Logger:
    """get_logger("client") → "sheet_indexer.client". name 생략 시 패키지 루트."""
    return logging.getLogger(f"{PKG}.{name}" if name else PKG)
