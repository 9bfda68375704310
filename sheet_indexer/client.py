"""Elasticsearch HTTP 클라이언트 (requests.Session 기반, 동기)

엔드포인트:
  - GET  /                  상태 확인
  - GET  /_template/{name}  템플릿 조회
  - POST /_template/{name}  템플릿 생성
  - POST /_bulk             벌크 인덱싱

모든 요청에 Basic Auth 헤더 주입 (username 설정 시).
transport 예외는 호출 지점별 에러 타입 + 고정 메시지로 변환됩니다.
"""

from __future__ import annotations

import base64
import json

import requests

from .config import ConnectionConfig
from .errors import (
    CREDENTIALS_MESSAGE,
    BulkSubmitError,
    ClusterConnectionError,
)
from .log import get_logger

logger = get_logger("client")

JSON_CONTENT_TYPE = "application/json"

CONNECT_FAILED_MESSAGE = (
    "Can't connect to the cluster. Check the host, port and SSL settings."
)
SUBMIT_FAILED_MESSAGE = "Failed to send data to the cluster."
UNKNOWN_CLUSTER_ERROR = "Unknown error returned by the cluster."


def build_auth_headers(connection: ConnectionConfig) -> dict[str, str]:
    """username이 있으면 Authorization: Basic base64(user:pass) 헤더."""
    if not connection.has_credentials:
        return {}
    raw = f"{connection.username}:{connection.password or ''}"
    token = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


def error_text(error) -> str:
    """클러스터 error 필드를 문자열로. 객체형이면 reason 우선."""
    if isinstance(error, dict):
        return error.get("reason") or json.dumps(error, ensure_ascii=False)
    return str(error)


def decode_body(response: requests.Response) -> dict:
    """JSON 본문 파싱. 객체가 아니거나 파싱 불가면 빈 dict."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class ClusterClient:
    """
    단일 클러스터용 동기 HTTP 클라이언트.

    Args:
        connection: 검증된 ConnectionConfig
        timeout:    요청 타임아웃 (초). None이면 requests 기본값 (무제한)

    사용 예:
        with ClusterClient(conn) as client:
            client.check_connection()
            client.submit_bulk(payload)
    """

    def __init__(self, connection: ConnectionConfig, *, timeout: float | None = None):
        self.connection = connection
        self.base_url = connection.base_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(build_auth_headers(connection))

    def __enter__(self) -> ClusterClient:
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.session.close()

    def _url(self, path: str) -> str:
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path}"

    # ================================================================
    # 저수준 요청
    # ================================================================

    def get(self, path: str) -> requests.Response:
        return self.session.get(self._url(path), timeout=self.timeout)

    def post(self, path: str, body: str) -> requests.Response:
        return self.session.post(
            self._url(path),
            data=body.encode("utf-8"),
            headers={"Content-Type": JSON_CONTENT_TYPE},
            timeout=self.timeout,
        )

    # ================================================================
    # 상태 확인
    # ================================================================

    def check_connection(self) -> dict:
        """
        GET / 로 클러스터 접근 확인.

        Returns:
            클러스터 정보 (name, version 등)

        Raises:
            ClusterConnectionError: 인증 실패 / 클러스터 에러 / 접속 불가
        """
        try:
            response = self.get("/")
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"[red]접속 실패[/red] {self.base_url}: {type(e).__name__}: {e}")
            raise ClusterConnectionError(CONNECT_FAILED_MESSAGE) from None

        if response.status_code != 200:
            message = body.get("message") if isinstance(body, dict) else None
            if message == "forbidden":
                raise ClusterConnectionError(CREDENTIALS_MESSAGE)
            if not message and isinstance(body, dict) and body.get("error"):
                message = error_text(body["error"])
            raise ClusterConnectionError(message or f"HTTP {response.status_code}")

        if not isinstance(body, dict):
            raise ClusterConnectionError(CONNECT_FAILED_MESSAGE)
        version = body.get("version", {}).get("number", "?")
        logger.info(f"클러스터 연결 OK: {self.base_url} (version={version})")
        return body

    # ================================================================
    # Bulk 전송
    # ================================================================

    def submit_bulk(self, payload: str) -> dict:
        """
        POST /_bulk 로 NDJSON payload 전송.

        200 응답의 항목별 실패(errors=true)는 경고만 남기고 계속 진행.

        Raises:
            BulkSubmitError: transport 실패 또는 클러스터 에러 응답
        """
        try:
            response = self.post("/_bulk", payload)
        except requests.RequestException as e:
            logger.warning(f"[red]벌크 전송 실패[/red] {self.base_url}: {type(e).__name__}: {e}")
            raise BulkSubmitError(SUBMIT_FAILED_MESSAGE) from None

        if response.status_code != 200:
            raise BulkSubmitError(self._bulk_error_message(response))

        body = decode_body(response)
        if body.get("errors"):
            failed = [
                item for item in body.get("items", [])
                if any(isinstance(v, dict) and v.get("error") for v in item.values())
            ]
            logger.warning(
                f"[yellow]벌크 항목 실패[/yellow] {len(failed)}/{len(body.get('items', []))}건"
            )
        return body

    @staticmethod
    def _bulk_error_message(response: requests.Response) -> str:
        body = decode_body(response)
        error = body.get("error")
        if not error:
            return UNKNOWN_CLUSTER_ERROR
        raw = error if isinstance(error, str) else json.dumps(error, ensure_ascii=False)
        if "AuthenticationException" in raw:
            return CREDENTIALS_MESSAGE
        return error_text(error)
