from typing import Any, List, Optional

import pytest
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, BaseMessage
from pydantic import Field

from toolchat.config import AppConfig


class FakeToolChatModel(GenericFakeChatModel):
    """按顺序返回预设消息的假模型，支持 bind_tools，并记录每次收到的消息。"""

    received: List[List[BaseMessage]] = Field(default_factory=list)

    def bind_tools(self, tools: Any, **kwargs: Any) -> "FakeToolChatModel":
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(list(messages))
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


class FailingChatModel(FakeToolChatModel):
    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise ConnectionError("upstream unavailable")


def fake_llm(*responses) -> FakeToolChatModel:
    return FakeToolChatModel(messages=iter(list(responses)))


def tool_call_message(name: str, args: dict, call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def cfg() -> AppConfig:
    cfg = AppConfig()
    cfg.gemini.api_key = "test-key"
    return cfg


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "LLM_PROVIDER",
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "GEMINI_BASE_URL",
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "DASHSCOPE_API_KEY",
        "DASHSCOPE_BASE_URL",
        "DASHSCOPE_MODEL",
        "LLM_MAX_OUTPUT_TOKENS_INT",
        "USER_HISTORY_MAX_LENGTH",
        "LLM_REQUEST_TIMEOUT",
        "TOOL_HTTP_TIMEOUT",
        "SYSTEM_PROMPT",
        "LANGFUSE_SECRET_KEY",
        "LANGFUSE_PUBLIC_KEY",
        "LANGFUSE_HOST",
        "LOG_LEVEL",
        "LOG_FILE",
        "HOST",
        "PORT",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
