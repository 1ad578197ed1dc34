"""
对话编排（中文注释）。

一次对话交换的完整流程：
1. 从 SessionStore 读取该 session 的历史
2. 历史 + 当前问题交给工具调用链（可能触发零到多次工具调用）
3. 成功：把这一轮问答写回 SessionStore，返回回复文本
4. 失败：记录原始异常，抛出带通用提示的 ChatFlowError，历史保持不变

不做任何重试，一次上游失败即整次请求失败。
"""

from __future__ import annotations

from typing import Dict, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.tools import BaseTool

from toolchat.chains.basic_chat import build_callbacks, build_llm
from toolchat.chains.tool_calling_chat import create_tool_calling_chain, process_tool_calls
from toolchat.config import AppConfig
from toolchat.core.memory import SessionStore
from toolchat.tools import build_tool_registry
from toolchat.utils.logger import logger


FAILURE_MESSAGE = "LLM generation failed"


class ChatFlowError(RuntimeError):
    """对话生成失败。str(e) 是可以直接返回给调用方的通用提示，原始异常在 __cause__ 中。"""

    def __init__(self, message: str = FAILURE_MESSAGE):
        super().__init__(message)


class ChatFlow:
    """
    对话编排器。配置、LLM、工具表在构造时确定，之后只读；
    唯一的共享可变状态是 SessionStore。
    """

    def __init__(
        self,
        cfg: AppConfig,
        store: Optional[SessionStore] = None,
        llm: Optional[BaseChatModel] = None,
        tools: Optional[Dict[str, BaseTool]] = None,
        callbacks: Optional[list] = None,
    ):
        self.cfg = cfg
        self.store = store if store is not None else SessionStore(cfg.chat.history_max_length)
        self.llm = llm if llm is not None else build_llm(cfg)
        self.tools = tools if tools is not None else build_tool_registry(cfg, self.llm)
        self.callbacks = callbacks if callbacks is not None else build_callbacks(cfg)
        self.chain = create_tool_calling_chain(self.llm, self.tools, cfg.chat.system_prompt)
        logger.info(
            "ChatFlow ready: provider={}, tools={}, max_output_tokens={}, history_max_length={}",
            cfg.provider,
            list(self.tools),
            cfg.chat.max_output_tokens,
            self.store.max_messages,
        )

    def handle_chat(self, question: str, session_id: Optional[str] = None) -> str:
        logger.info(f"Human: {question[:200]} (session_id={session_id or '-'})")

        messages = self.store.get(session_id)
        messages.append(HumanMessage(content=question))

        try:
            answer = process_tool_calls(self.chain, messages, self.tools, callbacks=self.callbacks)
        except Exception as e:
            logger.exception(f"LLM generation failed (session_id={session_id or '-'}): {e}")
            raise ChatFlowError() from e

        logger.info(f"AI: {answer[:200]}")
        self.store.append(session_id, question, answer)
        return answer
