# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProxyChatRequest(BaseModel):
    """转发给本地代理的请求描述：目标地址与凭据随 body 一并交给代理中转。"""

    model_config = ConfigDict(populate_by_name=True)

    api_url: str = Field(alias="apiUrl")
    api_key: str = Field(alias="apiKey")
    model: str
    # 消息原样转发（content 可为文本或 parts 列表，也可缺省，如仅含 tool_calls 的 assistant 消息）
    messages: List[Dict[str, Any]]
    options: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator("messages")
    @classmethod
    def _require_role(cls, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for i, message in enumerate(messages):
            if "role" not in message:
                raise ValueError(f"messages[{i}] 缺少 role")
        return messages

    def to_payload(self) -> dict[str, Any]:
        body = self.model_dump(by_alias=True)
        # options 最后合并，允许覆盖前面的字段
        body.update(self.options)
        return body
