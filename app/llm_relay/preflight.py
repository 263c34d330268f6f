# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from .endpoints import detect_provider
from .http import LLMHTTPError
from .service import APIService
from .settings import settings


async def preflight_llm(
    *,
    base_url: str | None = None,
    api_key: str | None = None,
    timeout_seconds: float | None = None,
    service: APIService | None = None,
) -> Any:
    """
    启动 preflight/healthcheck：
    - gemini: GET {origin}/{version}/models（key 同时放在 query 与 x-goog-api-key）
    - openai: GET {base_url}/models（Bearer 鉴权）

    未传入的 base_url / api_key / timeout_seconds 取自 settings。
    失败直接抛出（含状态码与响应片段），成功返回连接测试结果。
    """
    if base_url is None:
        base_url = settings.LLM_BASE_URL
    if api_key is None:
        api_key = settings.LLM_API_KEY.get_secret_value() if settings.LLM_API_KEY else ""
    if timeout_seconds is None:
        timeout_seconds = settings.PREFLIGHT_TIMEOUT

    if not base_url:
        raise ValueError("LLM_BASE_URL 不能为空")
    if not api_key:
        raise ValueError("LLM API key 不能为空（请配置 LLM_API_KEY）")

    provider = detect_provider(base_url)
    service = service or APIService()

    logger.info(f"🔎 LLM preflight | provider={provider} base_url={base_url}")

    try:
        result = await service.test_connection(base_url, api_key, timeout=timeout_seconds)
    except (LLMHTTPError, httpx.HTTPError) as e:
        logger.error(f"❌ LLM preflight 失败 | provider={provider} base_url={base_url} err={e}")
        raise

    logger.success(f"✅ LLM preflight OK | provider={provider}")
    return result
