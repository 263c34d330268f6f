# -*- coding: utf-8 -*-
"""
LLM 中转客户端

设计目标：
- 聊天请求统一经本地代理转发（目标地址与 key 放在 body 中交给代理）
- 识别 Gemini 官方地址与 OpenAI 兼容地址，连接测试按各自的 URL 形态直连
- 固定次数的指数退避重试；超时不重试
"""

from .http import (
    ConnectionTestError,
    GatewayTimeoutError,
    LLMHTTPError,
    MalformedResponseError,
    ProxyRequestError,
    RequestTimeoutError,
)
from .preflight import preflight_llm
from .replies import extract_reply_text
from .service import APIService

__all__ = [
    "APIService",
    "ConnectionTestError",
    "GatewayTimeoutError",
    "LLMHTTPError",
    "MalformedResponseError",
    "ProxyRequestError",
    "RequestTimeoutError",
    "extract_reply_text",
    "preflight_llm",
]
