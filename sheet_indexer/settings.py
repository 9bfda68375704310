"""연결 설정 저장소 (JSON key-value 파일)

저장 키: host, port, use_ssl, username, password, was_checked
use_ssl / was_checked는 "true"/"false" 문자열로 기록됩니다.
"""

from __future__ import annotations

import json
from pathlib import Path

from .config import ConnectionConfig, parse_bool
from .errors import InvalidConfigError
from .log import get_logger

logger = get_logger("settings")

SETTINGS_KEYS = ("host", "port", "use_ssl", "username", "password", "was_checked")


class SettingsStore:
    """
    세션 간 유지되는 연결 설정.

    사용 예:
        store = SettingsStore(Path("~/.sheet_indexer/settings.json").expanduser())
        store.save(ConnectionConfig(host="es.example.com", port=9200))
        conn = store.connection()
        store.mark_checked()
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict:
        """저장된 설정 반환. 파일이 없으면 빈 dict."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidConfigError(f"Settings file is not valid JSON: {self.path} ({e})") from e
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Settings file must hold a JSON object: {self.path}")
        return {k: v for k, v in data.items() if k in SETTINGS_KEYS}

    def _write(self, settings: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(settings, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    def save(self, connection: ConnectionConfig, was_checked: bool = False):
        """연결 정보 저장. 새 값이 저장되면 was_checked는 다시 확인 전 상태."""
        settings = connection.to_settings()
        settings["was_checked"] = "true" if was_checked else "false"
        self._write(settings)
        logger.info(f"설정 저장: [cyan]{self.path}[/cyan] (host={connection.host})")

    def mark_checked(self):
        settings = self.load()
        settings["was_checked"] = "true"
        self._write(settings)

    @property
    def was_checked(self) -> bool:
        return parse_bool(self.load().get("was_checked"))

    def connection(self, overrides: dict | None = None) -> ConnectionConfig:
        """저장된 설정 + overrides(None 값은 무시)로 ConnectionConfig 생성."""
        settings = self.load()
        for key, value in (overrides or {}).items():
            if value is not None:
                settings[key] = value
        return ConnectionConfig.from_settings(settings)
