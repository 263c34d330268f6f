# -*- coding: utf-8 -*-
from __future__ import annotations

import posixpath
import re
from urllib.parse import urlsplit, urlunsplit

GEMINI_HOST_SUFFIX = "generativelanguage.googleapis.com"
GEMINI_DEFAULT_VERSION = "v1beta"
CHAT_COMPLETIONS_PATH = "chat/completions"

_RE_VERSION_SEGMENT = re.compile(r"^v\d")
_RE_V1_SUFFIX = re.compile(r"/v1$", re.IGNORECASE)


def join_url(base_url: str, *paths: str) -> str:
    """
    安全拼接 URL：
    - 处理 base_url 有/无尾部斜杠
    - 处理 base_url 自带 path 前缀（如 https://api.xxx.com/proxy）
    - 避免出现双斜杠或路径丢失

    注意：此函数不会“改写 base_url”，只返回拼接后的新 URL。
    """
    if base_url is None:
        raise ValueError("base_url 不能为空")

    base_url = str(base_url).strip()
    if not base_url:
        raise ValueError("base_url 不能为空")

    parts = urlsplit(base_url)
    base_path = (parts.path or "").rstrip("/")

    clean_parts = [str(p).strip("/") for p in paths if p is not None and str(p).strip("/") != ""]
    new_path = posixpath.join(base_path, *clean_parts) if clean_parts else base_path

    # 绝对 URL 必须确保 path 以 / 开头
    if parts.scheme and parts.netloc:
        if not new_path.startswith("/"):
            new_path = "/" + new_path if new_path else "/"

    return urlunsplit((parts.scheme, parts.netloc, new_path, parts.query, parts.fragment))


def _split_absolute(url: str):
    """解析绝对 URL；缺少 scheme/host 或无法解析时返回 None。"""
    if not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url.strip())
        # 访问 hostname/port 会触发对 netloc 的校验（如非法端口）
        if not parts.scheme or not parts.hostname:
            return None
        _ = parts.port
    except ValueError:
        return None
    return parts


def is_gemini_host(url: str) -> bool:
    """host 是否为 Gemini 官方域名（大小写不敏感）；非法 URL 一律返回 False。"""
    parts = _split_absolute(url)
    if parts is None:
        return False
    return parts.hostname.lower().endswith(GEMINI_HOST_SUFFIX)


def gemini_base(url: str) -> str:
    """
    提取 Gemini 的版本化 base：{origin}/{version}

    version 取 path 中第一个形如 v1 / v1beta 的路径段，缺省为 v1beta。
    无法解析时原样返回。
    """
    parts = _split_absolute(url)
    if parts is None:
        return url

    origin = f"{parts.scheme}://{parts.netloc.rpartition('@')[2]}"
    segments = [seg for seg in (parts.path or "").split("/") if seg]
    version = next((seg for seg in segments if _RE_VERSION_SEGMENT.match(seg)), GEMINI_DEFAULT_VERSION)
    return f"{origin}/{version}"


def normalize_endpoint(api_url: str) -> str:
    """以 /v1 结尾的 OpenAI 兼容地址补全为 /v1/chat/completions；其余（含 Gemini）原样返回。"""
    if is_gemini_host(api_url):
        return api_url
    trimmed = api_url[:-1] if api_url.endswith("/") else api_url
    if _RE_V1_SUFFIX.search(trimmed):
        return f"{trimmed}/{CHAT_COMPLETIONS_PATH}"
    return api_url
