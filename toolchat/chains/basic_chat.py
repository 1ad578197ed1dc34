"""
基础对话组件：

设计目标：
1. 把“模型初始化 / 回调”与入口（HTTP、工具、测试）解耦；
2. 所有供应商都走 OpenAI 兼容接口，统一用 langchain-openai 的 ChatOpenAI；
3. 每次调用都带上 max_tokens 与超时，且不做自动重试。
"""

from __future__ import annotations

import os
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from langfuse.langchain import CallbackHandler

from toolchat.config import AppConfig
from toolchat.utils.logger import logger


def build_callbacks(cfg: AppConfig) -> list:
    """
    构造 LangChain callbacks（当前仅接入 Langfuse）。

    说明：
    - 这里用“按需开启”的方式：只有配置了 Langfuse key 才创建 handler；
    - 后续要接入更多观测/指标，只要在这里追加即可，入口代码无需改动。
    """

    if not (cfg.langfuse.secret_key and cfg.langfuse.public_key):
        return []

    os.environ["LANGFUSE_SECRET_KEY"] = cfg.langfuse.secret_key
    os.environ["LANGFUSE_PUBLIC_KEY"] = cfg.langfuse.public_key
    os.environ["LANGFUSE_HOST"] = cfg.langfuse.host
    logger.info("Langfuse 回调已启用，将链路追踪发送到 {}", cfg.langfuse.host)
    return [CallbackHandler()]


def build_llm(cfg: AppConfig) -> ChatOpenAI:
    """
    根据配置创建 LLM。

    说明：
    - Gemini：通过 Google 的 OpenAI 兼容接口调用，需要 base_url + api_key + model；
    - DashScope/Qwen：同样走 OpenAI 兼容接口；
    - OpenAI：使用 api_key + model；
    - max_tokens 对主对话和所有会再次生成内容的工具统一生效。
    """

    common = dict(
        max_tokens=cfg.chat.max_output_tokens,
        timeout=cfg.chat.request_timeout,
        max_retries=0,
    )
    provider = (cfg.provider or "gemini").lower()
    if provider == "gemini":
        return ChatOpenAI(
            api_key=cfg.gemini.api_key,
            base_url=cfg.gemini.base_url,
            model=cfg.gemini.model,
            temperature=cfg.gemini.temperature,
            **common,
        )
    if provider == "dashscope":
        return ChatOpenAI(
            api_key=cfg.dashscope.api_key,
            base_url=cfg.dashscope.base_url,
            model=cfg.dashscope.model,
            temperature=cfg.dashscope.temperature,
            **common,
        )

    return ChatOpenAI(
        api_key=cfg.openai.api_key,
        model=cfg.openai.model,
        temperature=cfg.openai.temperature,
        **common,
    )


def message_text(message: BaseMessage) -> str:
    """提取消息中的纯文本（兼容 content 为分段列表的情况）。"""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text") or "")
    return "".join(parts)


def generate_text(llm: BaseChatModel, prompt: str, callbacks: Optional[list] = None) -> str:
    """不带 system prompt 和历史，直接把 prompt 交给模型，返回文本。"""
    config = {"callbacks": callbacks} if callbacks else {}
    response = llm.invoke(prompt, config=config)
    return message_text(response)
