"""
配置加载模块（中文注释）：
- 优先从 `.env` 读取环境变量（如 GEMINI_API_KEY）
- 再从 `config/config.yaml` 读取其他配置
- 数值类配置缺失或非法时回退到默认值，不会导致启动失败
- 若关键信息缺失（API Key、模型名），由 validate_config 给出友好提示
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import os

import yaml
from dotenv import load_dotenv

# 加载 .env 文件中的环境变量（如果存在）
load_dotenv()


DEFAULT_MAX_OUTPUT_TOKENS = 500
DEFAULT_HISTORY_MAX_LENGTH = 10
DEFAULT_REQUEST_TIMEOUT = 60.0
DEFAULT_TOOL_HTTP_TIMEOUT = 10.0
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant that provides accurate and concise information."
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

SUPPORTED_PROVIDERS = ("gemini", "openai", "dashscope")


@dataclass
class GeminiSettings:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_GEMINI_BASE_URL
    model: Optional[str] = "gemini-2.0-flash"
    temperature: float = 0.2


@dataclass
class OpenAISettings:
    api_key: Optional[str] = None
    model: Optional[str] = None
    temperature: float = 0.2


@dataclass
class DashScopeSettings:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    temperature: float = 0.2


@dataclass
class LangfuseSettings:
    secret_key: Optional[str] = None
    public_key: Optional[str] = None
    host: Optional[str] = "https://cloud.langfuse.com"


@dataclass
class ChatSettings:
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    history_max_length: int = DEFAULT_HISTORY_MAX_LENGTH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


@dataclass
class ToolSettings:
    http_timeout: float = DEFAULT_TOOL_HTTP_TIMEOUT
    agify_url: str = "https://api.agify.io/"
    genderize_url: str = "https://api.genderize.io/"


@dataclass
class ServerSettings:
    host: str = "127.0.0.1"
    port: int = 3400
    cors_origins: Optional[str] = None


@dataclass
class AppConfig:
    provider: str = "gemini"
    gemini: GeminiSettings = field(default_factory=GeminiSettings)
    openai: OpenAISettings = field(default_factory=OpenAISettings)
    dashscope: DashScopeSettings = field(default_factory=DashScopeSettings)
    langfuse: LangfuseSettings = field(default_factory=LangfuseSettings)
    chat: ChatSettings = field(default_factory=ChatSettings)
    tools: ToolSettings = field(default_factory=ToolSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    log_level: str = "INFO"
    log_file: Optional[str] = None


def parse_positive_int(value: Any, default: int) -> int:
    """把字符串/数字解析为正整数；缺失、非法或非正数时返回默认值。"""
    if value is None or value == "":
        return default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def parse_positive_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def load_yaml_config(path: str = "config/config.yaml") -> dict:
    """读取 YAML 配置文件为字典。"""
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with config_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """合并环境变量与 YAML，生成最终配置对象（环境变量优先）。"""
    data = load_yaml_config(path)
    gemini_cfg = (data.get("gemini") or {})
    openai_cfg = (data.get("openai") or {})
    dashscope_cfg = (data.get("dashscope") or {})
    langfuse_cfg = (data.get("langfuse") or {})
    chat_cfg = (data.get("chat") or {})
    tools_cfg = (data.get("tools") or {})
    server_cfg = (data.get("server") or {})

    provider = (os.getenv("LLM_PROVIDER") or data.get("provider") or "gemini").strip().lower()

    # Gemini（通过 OpenAI 兼容接口调用）
    gemini = GeminiSettings(
        api_key=os.getenv("GEMINI_API_KEY") or gemini_cfg.get("api_key"),
        base_url=os.getenv("GEMINI_BASE_URL") or gemini_cfg.get("base_url") or DEFAULT_GEMINI_BASE_URL,
        model=os.getenv("GEMINI_MODEL") or gemini_cfg.get("model") or "gemini-2.0-flash",
        temperature=float(gemini_cfg.get("temperature") or 0.2),
    )

    # OpenAI
    openai = OpenAISettings(
        api_key=os.getenv("OPENAI_API_KEY") or openai_cfg.get("api_key"),
        model=os.getenv("OPENAI_MODEL") or openai_cfg.get("model"),
        temperature=float(openai_cfg.get("temperature") or 0.2),
    )

    # DashScope (Qwen)
    dashscope = DashScopeSettings(
        api_key=os.getenv("DASHSCOPE_API_KEY") or dashscope_cfg.get("api_key"),
        base_url=os.getenv("DASHSCOPE_BASE_URL") or dashscope_cfg.get("base_url"),
        model=os.getenv("DASHSCOPE_MODEL") or dashscope_cfg.get("model"),
        temperature=float(dashscope_cfg.get("temperature") or 0.2),
    )

    # Langfuse
    langfuse = LangfuseSettings(
        secret_key=os.getenv("LANGFUSE_SECRET_KEY") or langfuse_cfg.get("secret_key"),
        public_key=os.getenv("LANGFUSE_PUBLIC_KEY") or langfuse_cfg.get("public_key"),
        host=os.getenv("LANGFUSE_HOST") or langfuse_cfg.get("host") or "https://cloud.langfuse.com",
    )

    # 对话参数：非法值一律回退默认值
    chat = ChatSettings(
        max_output_tokens=parse_positive_int(
            os.getenv("LLM_MAX_OUTPUT_TOKENS_INT") or chat_cfg.get("max_output_tokens"),
            DEFAULT_MAX_OUTPUT_TOKENS,
        ),
        history_max_length=parse_positive_int(
            os.getenv("USER_HISTORY_MAX_LENGTH") or chat_cfg.get("history_max_length"),
            DEFAULT_HISTORY_MAX_LENGTH,
        ),
        request_timeout=parse_positive_float(
            os.getenv("LLM_REQUEST_TIMEOUT") or chat_cfg.get("request_timeout"),
            DEFAULT_REQUEST_TIMEOUT,
        ),
        system_prompt=os.getenv("SYSTEM_PROMPT") or chat_cfg.get("system_prompt") or DEFAULT_SYSTEM_PROMPT,
    )

    tools = ToolSettings(
        http_timeout=parse_positive_float(
            os.getenv("TOOL_HTTP_TIMEOUT") or tools_cfg.get("http_timeout"),
            DEFAULT_TOOL_HTTP_TIMEOUT,
        ),
        agify_url=tools_cfg.get("agify_url") or "https://api.agify.io/",
        genderize_url=tools_cfg.get("genderize_url") or "https://api.genderize.io/",
    )

    server = ServerSettings(
        host=os.getenv("HOST") or server_cfg.get("host") or "127.0.0.1",
        port=parse_positive_int(os.getenv("PORT") or server_cfg.get("port"), 3400),
        cors_origins=os.getenv("CORS_ORIGINS") or server_cfg.get("cors_origins"),
    )

    return AppConfig(
        provider=provider,
        gemini=gemini,
        openai=openai,
        dashscope=dashscope,
        langfuse=langfuse,
        chat=chat,
        tools=tools,
        server=server,
        log_level=(os.getenv("LOG_LEVEL") or data.get("log_level") or "INFO"),
        log_file=os.getenv("LOG_FILE") or data.get("log_file"),
    )


def validate_config(cfg: AppConfig) -> list[str]:
    """校验配置，返回错误列表。"""
    errors: list[str] = []
    provider = (cfg.provider or "gemini").lower()
    if provider == "gemini":
        if not cfg.gemini.api_key:
            errors.append("GEMINI_API_KEY 未设置，请在 .env 或 config/config.yaml 中填写")
        if not cfg.gemini.model:
            errors.append("Gemini 模型未设置，请在 .env 的 GEMINI_MODEL 或 config.yaml 的 gemini.model 中填写")
    elif provider == "openai":
        if not cfg.openai.api_key:
            errors.append("OPENAI_API_KEY 未设置，请在 .env 或 config/config.yaml 中填写")
        if not cfg.openai.model:
            errors.append("OpenAI 模型未设置，请在 .env 的 OPENAI_MODEL 或 config.yaml 的 openai.model 中填写")
    elif provider == "dashscope":
        if not cfg.dashscope.api_key:
            errors.append("DASHSCOPE_API_KEY 未设置，请在 .env 或 config/config.yaml 中填写")
        if not cfg.dashscope.base_url:
            errors.append("DashScope base_url 未设置，请在 .env 的 DASHSCOPE_BASE_URL 或 config.yaml 中填写")
        if not cfg.dashscope.model:
            errors.append("DashScope 模型未设置，请在 config/config.yaml 的 dashscope.model 中填写，例如 qwen-plus")
    else:
        errors.append(f"provider 配置不正确：{cfg.provider}，请使用 {' / '.join(SUPPORTED_PROVIDERS)}")

    # Langfuse 校验 (如果配置了 key 则校验完整性)
    if cfg.langfuse.secret_key or cfg.langfuse.public_key:
        if not cfg.langfuse.secret_key:
            errors.append("Langfuse secret_key 未设置")
        if not cfg.langfuse.public_key:
            errors.append("Langfuse public_key 未设置")

    return errors
