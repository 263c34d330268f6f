# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any


def _join_text_parts(parts: Any) -> str | None:
    if not isinstance(parts, list):
        return None
    texts: list[str] = []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            texts.append(part["text"])
    return "\n".join(texts).strip() if texts else None


def extract_text_from_openai_chat_completions(data: dict) -> str | None:
    choices = data.get("choices") or []
    first = choices[0] if isinstance(choices, list) and choices else {}
    message = (first.get("message") if isinstance(first, dict) else None) or {}
    content = message.get("content") if isinstance(message, dict) else None

    if isinstance(content, str):
        return content

    # 少数实现会把 content 作为 parts 列表
    return _join_text_parts(content)


def extract_text_from_gemini_native(data: dict) -> str | None:
    candidates = data.get("candidates") or []
    first = candidates[0] if isinstance(candidates, list) and candidates else {}
    content = (first.get("content") if isinstance(first, dict) else None) or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    return _join_text_parts(parts)


def extract_reply_text(data: Any) -> str | None:
    """从 OpenAI chat/completions 或 Gemini generateContent 的响应中取出回复文本。"""
    if not isinstance(data, dict):
        return None
    if "choices" in data:
        return extract_text_from_openai_chat_completions(data)
    if "candidates" in data:
        return extract_text_from_gemini_native(data)
    return None
