# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Literal

from .url import gemini_base, is_gemini_host, join_url

ProviderKind = Literal["openai", "gemini"]

GEMINI_MODEL_NAME_PREFIX = "models/"


def detect_provider(api_url: str) -> ProviderKind:
    return "gemini" if is_gemini_host(api_url) else "openai"


def build_openai_models_url(api_url: str) -> str:
    return join_url(api_url, "models")


def build_gemini_models_url(api_url: str) -> str:
    # {origin}/{version}/models，key 由调用方以 query 参数附加
    return join_url(gemini_base(api_url), "models")


def build_models_url(api_url: str) -> str:
    if detect_provider(api_url) == "gemini":
        return build_gemini_models_url(api_url)
    return build_openai_models_url(api_url)


def build_auth_headers(api_url: str, api_key: str) -> dict[str, str]:
    if detect_provider(api_url) == "gemini":
        return {"x-goog-api-key": api_key}
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def strip_gemini_model_prefix(name: str | None) -> str:
    name = name or ""
    if name.startswith(GEMINI_MODEL_NAME_PREFIX):
        return name[len(GEMINI_MODEL_NAME_PREFIX):]
    return name
