# -*- coding: utf-8 -*-
from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

GATEWAY_TIMEOUT = 504


class LLMHTTPError(RuntimeError):
    pass


class GatewayTimeoutError(LLMHTTPError):
    status_code = GATEWAY_TIMEOUT

    def __init__(self, message: str = "请求超时(504): 模型响应时间过长，请稍后重试"):
        super().__init__(message)


class ProxyRequestError(LLMHTTPError):
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"代理请求失败: {status_code} - {detail}")


class RequestTimeoutError(LLMHTTPError):
    """客户端超时（取消）。不会被重试。"""

    def __init__(self, message: str = "请求超时: 模型响应时间过长，请稍后重试"):
        super().__init__(message)


class MalformedResponseError(LLMHTTPError):
    def __init__(self, message: str = "响应格式错误: 无法解析API返回的JSON数据"):
        super().__init__(message)


class ConnectionTestError(LLMHTTPError):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"连接失败: {status_code} - {body}")


def _error_detail(resp: httpx.Response) -> str:
    """
    尽力从错误响应体中提取服务端给出的错误信息：
    - {"error": "..."} -> 字符串本身
    - {"error": {"message": "..."}} -> message
    解析失败或无可用字段时回退为 HTTP reason phrase。
    """
    fallback = resp.reason_phrase or str(resp.status_code)
    try:
        body = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error.strip():
        return error
    return fallback


def raise_for_proxy_status(resp: httpx.Response) -> None:
    """代理调用的非 2xx 处理：504 单独识别，其余尽量带上服务端错误信息。"""
    if resp.is_success:
        return

    logger.error(
        "Proxy HTTP 错误响应 status_code={} url={} body_snippet={}",
        resp.status_code,
        resp.request.url,
        (resp.text or "")[:1000],
    )
    if resp.status_code == GATEWAY_TIMEOUT:
        raise GatewayTimeoutError()
    raise ProxyRequestError(resp.status_code, _error_detail(resp))


def raise_for_connection_status(resp: httpx.Response) -> None:
    if resp.is_success:
        return

    text = resp.text or ""
    logger.error(
        "连接测试失败 status_code={} url={} body_snippet={}",
        resp.status_code,
        resp.request.url,
        text[:1000],
    )
    raise ConnectionTestError(resp.status_code, text)


def response_json_checked(
    resp: httpx.Response,
    *,
    log_headers: bool = True,
    context: str | None = None,
) -> Any:
    """
    解析 2xx 响应体为 JSON。

    若 JSONDecodeError（含空 body、HTML 网关页等）：
    - 日志输出：status_code、content-type、headers(可选)、resp.text 前 1000 字符
    - 抛出 MalformedResponseError
    """
    status_code = resp.status_code
    content_type = (resp.headers.get("content-type") or "").lower()
    ctx = f" | {context}" if context else ""

    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        headers = dict(resp.headers) if log_headers else {}
        logger.error(
            "LLM HTTP JSONDecodeError{} status_code={} content_type={} url={} headers={} body_snippet={}",
            ctx,
            status_code,
            content_type,
            resp.request.url,
            headers,
            (resp.text or "")[:1000],
        )
        raise MalformedResponseError() from e
