"""
测试公共夹具。

- 所有 HTTP 请求通过 httpx.MockTransport 拦截，不访问网络
- 重试间隔被替换为只记录时长的假 sleep
"""
from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from llm_relay import APIService

PROXY_URL = "http://proxy.test/api/proxy/"


class RecordingTransport(httpx.MockTransport):
    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_service():
    """构造带假 transport 与假 sleep 的 APIService，返回 (service, transport, delays)。"""

    def _make(handler, *, max_retries: int = 3, base_delay: float = 1.0):
        transport = RecordingTransport(handler)
        service = APIService(
            max_retries=max_retries,
            base_delay=base_delay,
            proxy_url=PROXY_URL,
            transport=transport,
        )
        delays: List[float] = []

        async def _fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        service._sleep = _fake_sleep
        return service, transport, delays

    return _make
