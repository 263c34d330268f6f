# -*- coding: utf-8 -*-
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


# === 配置类定义 ===
class RelaySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # [基础配置] API Key 建议使用 SecretStr 类型
    LLM_API_KEY: SecretStr | None = Field(
        default=None,
        description="LLM 的 API Key（Gemini 官方 / OpenAI 兼容均可）",
    )

    LLM_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="LLM Base URL（preflight 默认直连该地址做连接测试）",
    )

    # ================================
    # 代理转发
    # ================================
    PROXY_URL: str = Field(
        default="http://127.0.0.1:8888/api/proxy/",
        description="本地代理地址：聊天请求 POST 到这里，由代理转发到真实 LLM 地址",
    )

    # ================================
    # 重试与超时（允许通过环境变量覆盖）
    # ================================
    MAX_RETRIES: int = Field(default=3, ge=1, description="聊天请求最大尝试次数（含首次）")
    BASE_DELAY: float = Field(default=1.0, ge=0, description="指数退避基准间隔（秒）")
    REQUEST_TIMEOUT: float = Field(default=60.0, gt=0, description="单次聊天请求超时（秒）")
    PREFLIGHT_TIMEOUT: float = Field(default=15.0, gt=0, description="连接测试超时（秒）")

    # ================================
    # 日志
    # ================================
    LOG_LEVEL: str = Field(default="DEBUG")
    LOG_TIMEZONE: str = Field(default="Asia/Shanghai")


settings = RelaySettings()
