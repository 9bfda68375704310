"""sheet_indexer 예외 계층

네트워크 경로의 예외(requests)는 호출 지점마다 아래 타입 중 하나로 변환되어
상위로 전달됩니다. 호출자는 transport 스택 트레이스 대신 메시지만 보게 됩니다.
"""

from __future__ import annotations

CREDENTIALS_MESSAGE = "The username and/or password is incorrect."


class SheetIndexerError(Exception):
    """모든 sheet_indexer 실패의 베이스."""


class InvalidConfigError(SheetIndexerError):
    """host/port/인덱스 이름 등 입력값 오류 (네트워크 호출 전에 검출)."""


class EmptyHeaderError(InvalidConfigError):
    """헤더 셀이 비어 있거나 정리 후 빈 키가 됨."""

    def __init__(self, column: int):
        self.column = column
        super().__init__(
            f"Header cell in column {column} is empty. "
            "Every data column needs a header with at least one letter or digit."
        )


class ColumnCountMismatchError(InvalidConfigError):
    def __init__(self, header_count: int, row_count: int):
        self.header_count = header_count
        self.row_count = row_count
        super().__init__(
            f"Header has {header_count} columns but the data has {row_count}. "
            "Header and data ranges must be the same width."
        )


class ClusterConnectionError(SheetIndexerError):
    """상태 확인(GET /) 실패."""


class TemplateError(SheetIndexerError):
    """인덱스 템플릿 조회/생성 실패."""


class BulkSubmitError(SheetIndexerError):
    """_bulk POST 실패 또는 클러스터 에러 응답."""


class NoDataError(SheetIndexerError):
    """입력은 정상이지만 전송된 도큐먼트가 0건."""


class MissingDocumentIdError(SheetIndexerError):
    """문서 ID 컬럼의 셀이 비어 있음. row는 1부터 시작."""

    def __init__(self, row: int):
        self.row = row
        super().__init__(f"Missing document id for data row {row}.")
