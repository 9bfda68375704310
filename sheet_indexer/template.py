"""인덱스 템플릿 프로비저닝

템플릿이 없을 때만 기본 템플릿으로 생성합니다 (기존 템플릿은 절대 덮어쓰지 않음).
"""

from __future__ import annotations

import json

import requests

from .client import ClusterClient, decode_body, error_text
from .errors import TemplateError
from .log import get_logger

logger = get_logger("template")

TEMPLATE_FAILED_MESSAGE = "Failed to check or create the index template."


def default_template(index_name: str) -> dict:
    """
    기본 인덱스 템플릿. 호출마다 새 dict 반환.

    - settings: shard 1 / replica 1 / refresh 5s / standard analyzer (stopwords 없음)
    - mappings: "_default_" 타입 아래 dynamic template.
                모든 문자열 필드 → analyzed text + raw keyword (256자 초과 시 미색인)
    - template:  대상 인덱스 이름 그대로 (glob 아님)
    """
    return {
        "order": 0,
        "template": index_name,
        "settings": {
            "index.refresh_interval": "5s",
            "number_of_shards": 1,
            "number_of_replicas": 1,
            "analysis": {
                "analyzer": {
                    "default": {"type": "standard", "stopwords": "_none_"},
                },
            },
        },
        "mappings": {
            "_default_": {
                "dynamic_templates": [
                    {
                        "string_fields": {
                            "match": "*",
                            "match_mapping_type": "string",
                            "mapping": {
                                "type": "text",
                                "norms": False,
                                "fields": {
                                    "raw": {"type": "keyword", "ignore_above": 256},
                                },
                            },
                        },
                    },
                ],
            },
        },
        "aliases": {},
    }


def ensure_template(client: ClusterClient, index_name: str, template_name: str) -> bool:
    """
    템플릿이 없으면(404) 기본 템플릿 생성.

    Returns: True면 새로 생성됨, False면 이미 존재 (변경 없음).

    Raises:
        TemplateError: 조회/생성 실패
    """
    path = f"/_template/{template_name}"
    try:
        response = client.get(path)
    except requests.RequestException as e:
        logger.warning(f"[red]템플릿 조회 실패[/red] {template_name}: {type(e).__name__}: {e}")
        raise TemplateError(TEMPLATE_FAILED_MESSAGE) from None

    if response.status_code == 200:
        logger.info(f"템플릿 유지: [cyan]{template_name}[/cyan] (이미 존재)")
        return False
    if response.status_code != 404:
        raise TemplateError(_cluster_message(response))

    body = json.dumps(default_template(index_name), ensure_ascii=False)
    try:
        created = client.post(path, body)
    except requests.RequestException as e:
        logger.warning(f"[red]템플릿 생성 실패[/red] {template_name}: {type(e).__name__}: {e}")
        raise TemplateError(TEMPLATE_FAILED_MESSAGE) from None

    if created.status_code != 200:
        raise TemplateError(_cluster_message(created))

    logger.info(f"템플릿 생성: [cyan]{template_name}[/cyan] → index={index_name}")
    return True


def _cluster_message(response: requests.Response) -> str:
    body = decode_body(response)
    if body.get("error"):
        return error_text(body["error"])
    if body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}: {response.text[:200]}"
