"""클러스터 연결 + 푸시 작업 설정"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from pathlib import Path

from .errors import InvalidConfigError

# ── 벌크 flush 기준 (라인 수) ──
# action/document 2줄 × 1000쌍. 바이트 계산이 아닌 고정 정책 (~10MB 전송 한도 이내)
BULK_MAX_LINES = 2000

DEFAULT_INDEX_TYPE = "doc"
DEFAULT_SETTINGS_PATH = Path.home() / ".sheet_indexer" / "settings.json"

_LOCAL_HOSTNAMES = ("localhost", "0.0.0.0")


def parse_bool(value) -> bool:
    """설정 저장소의 bool 값. "true"/"false" 문자열로 저장된 경우도 처리."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


def parse_port(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigError(f"Port must be a number, got {value!r}.") from None


@dataclass(frozen=True)
class ConnectionConfig:
    """
    클러스터 연결 정보. 작업 단위로 불변.

    Examples:
        conn = ConnectionConfig(host="es.example.com", port=9243, use_ssl=True,
                                username="elastic", password="changeme")
        conn.base_url  # "https://es.example.com:9243"
    """

    host: str = ""
    port: int | None = 9200
    use_ssl: bool = False
    username: str | None = None
    password: str | None = None

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username)

    @classmethod
    def from_settings(cls, settings: dict) -> ConnectionConfig:
        """설정 저장소(dict)로부터 생성. 문자열로 저장된 port/use_ssl도 변환."""
        return cls(
            host=(settings.get("host") or "").strip(),
            port=parse_port(settings.get("port")),
            use_ssl=parse_bool(settings.get("use_ssl")),
            username=settings.get("username") or None,
            password=settings.get("password") or None,
        )

    def to_settings(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "use_ssl": "true" if self.use_ssl else "false",
            "username": self.username or "",
            "password": self.password or "",
        }


def _is_local_address(host: str) -> bool:
    if host.lower() in _LOCAL_HOSTNAMES:
        return True
    try:
        address = ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False  # 호스트명
    return address.is_loopback or address.is_unspecified


def validate_connection(config: ConnectionConfig) -> None:
    """
    연결 정보 검증. 네트워크 호출 없음.

    클러스터는 외부에서 호출하는 ingest 측에서 접근 가능해야 하므로
    loopback / any-interface 주소는 거부.

    Raises:
        InvalidConfigError: host/port 누락, 범위 밖 port, 로컬 주소
    """
    if not config.host:
        raise InvalidConfigError("Host is required.")
    if config.port is None:
        raise InvalidConfigError("Port is required.")
    if not 1 <= config.port <= 65535:
        raise InvalidConfigError(f"Port must be between 1 and 65535, got {config.port}.")
    if _is_local_address(config.host):
        raise InvalidConfigError(
            f"Host '{config.host}' is a local address. "
            "The cluster must be reachable from outside this machine."
        )


def validate_name(value: str | None, label: str, required: bool = True) -> None:
    """인덱스/타입/템플릿 이름 검증: 필수 여부 + 공백 불가."""
    if not value:
        if required:
            raise InvalidConfigError(f"{label} is required.")
        return
    if any(ch.isspace() for ch in value):
        raise InvalidConfigError(f"{label} cannot contain spaces: {value!r}")


@dataclass
class Config:
    # 데이터 소스 (CSV 또는 Parquet)
    sheet_path: Path | None = None
    header_row: int = 1                 # 헤더 행 번호 (1부터)
    doc_id_column: str | None = None    # 헤더 라벨 또는 1부터 시작하는 컬럼 번호
    limit: int = 0                      # 0 = 전체

    # 인덱스
    index_name: str = ""
    index_type: str = DEFAULT_INDEX_TYPE
    template_name: str | None = None    # None → 템플릿 프로비저닝 생략

    # 처리
    bulk_max_lines: int = BULK_MAX_LINES

    # 연결 설정 저장소
    settings_path: Path = field(default_factory=lambda: DEFAULT_SETTINGS_PATH)
    connection_overrides: dict = field(default_factory=dict)  # CLI에서 덮어쓴 값

    # 로그
    log_dir: Path | None = None
