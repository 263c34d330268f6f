# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .endpoints import (
    build_auth_headers,
    build_models_url,
    detect_provider,
    strip_gemini_model_prefix,
)
from .http import (
    RequestTimeoutError,
    raise_for_connection_status,
    raise_for_proxy_status,
    response_json_checked,
)
from .models import ProxyChatRequest
from .settings import settings
from .url import gemini_base, is_gemini_host, normalize_endpoint


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    sleep_s = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "LLM 请求失败，{:.2f}s 后重试 | attempt={} err={}",
        sleep_s,
        retry_state.attempt_number,
        exc,
    )


class APIService:
    """
    LLM 调用客户端：

    - call_openai_api: 经本地代理转发 OpenAI 兼容的 chat/completions 请求（带重试）
    - test_connection: 直连上游（Gemini 官方 / OpenAI 兼容）拉取模型列表，验证地址与 key
    """

    def __init__(
        self,
        *,
        max_retries: int | None = None,
        base_delay: float | None = None,
        proxy_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self._base_delay = settings.BASE_DELAY if base_delay is None else base_delay
        if self._max_retries < 1:
            raise ValueError("max_retries 至少为 1")
        if self._base_delay < 0:
            raise ValueError("base_delay 不能为负数")

        self._proxy_url = (proxy_url or settings.PROXY_URL).strip()
        self._transport = transport
        self._sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def base_delay(self) -> float:
        return self._base_delay

    @property
    def proxy_url(self) -> str:
        return self._proxy_url

    # ===== Gemini 兼容辅助 =====
    @staticmethod
    def is_gemini_host(url: str) -> bool:
        return is_gemini_host(url)

    @staticmethod
    def gemini_base(url: str) -> str:
        return gemini_base(url)

    @staticmethod
    def normalize_endpoint(api_url: str) -> str:
        return normalize_endpoint(api_url)

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    async def _post_proxy(self, payload: dict[str, Any], timeout: float) -> Any:
        logger.debug("LLM 代理请求 | proxy={} api_url={} model={}", self._proxy_url, payload.get("apiUrl"), payload.get("model"))

        async def _send() -> httpx.Response:
            async with self._client(timeout) as client:
                return await client.post(
                    self._proxy_url,
                    headers={"Content-Type": "application/json"},
                    content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                )

        try:
            resp = await asyncio.wait_for(_send(), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"LLM 请求超时 | timeout={timeout}s proxy={self._proxy_url}")
            raise RequestTimeoutError() from e

        raise_for_proxy_status(resp)
        data = response_json_checked(resp, context="proxy")
        logger.debug("API完整返回: {}", json.dumps(data, indent=2, ensure_ascii=False))
        return data

    async def call_openai_api(
        self,
        api_url: str,
        api_key: str,
        model: str,
        messages: Sequence[Mapping[str, Any]],
        options: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        通用的 OpenAI 兼容 API 调用（经本地代理转发）。

        - body: {apiUrl, apiKey, model, messages, **options}
        - 每次尝试独立超时；超时不重试，直接抛出 RequestTimeoutError
        - 其他失败按 base_delay * 2^i 退避，最多尝试 max_retries 次，最后一次的异常原样抛出
        """
        timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        request = ProxyChatRequest(
            api_url=api_url,
            api_key=api_key,
            model=model,
            messages=list(messages),
            options=dict(options or {}),
        )
        payload = request.to_payload()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._base_delay, exp_base=2, min=0),
            # 只重试普通异常；取消 (CancelledError) 与超时直接抛出
            retry=retry_if_exception_type(Exception) & retry_if_not_exception_type(RequestTimeoutError),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._post_proxy(payload, timeout)

    async def test_connection(self, api_url: str, api_key: str, timeout: float | None = None) -> Any:
        """
        测试 API 连接（直连上游，不经代理，不重试）：

        - Gemini: GET {origin}/{version}/models?key=...，返回 [{"id": ...}]（去掉 models/ 前缀）
        - 其他: GET {api_url}/models（Bearer 鉴权），原样返回 JSON
        """
        timeout = settings.PREFLIGHT_TIMEOUT if timeout is None else timeout
        provider = detect_provider(api_url)
        url = build_models_url(api_url)
        headers = build_auth_headers(api_url, api_key)
        params = {"key": api_key} if provider == "gemini" else None

        logger.info(f"🔎 LLM 连接测试 | provider={provider} url={url}")

        async with self._client(timeout) as client:
            resp = await client.get(url, headers=headers, params=params)

        raise_for_connection_status(resp)
        data = response_json_checked(resp, context=f"test_connection:{provider}")

        if provider == "gemini" and isinstance(data, dict) and isinstance(data.get("models"), list):
            return [
                {"id": strip_gemini_model_prefix(m.get("name") if isinstance(m, dict) else None)}
                for m in data["models"]
            ]
        return data
