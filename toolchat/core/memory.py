"""
会话记忆管理模块。

功能：
- 提供基于内存的会话历史存储（InMemoryChatMessageHistory，进程重启即丢失）
- 按 Session ID 隔离不同的对话上下文
- 每次写入后按消息条数截断，只保留最近的 max_messages 条

并发：
FastAPI 会在线程池中执行同步接口，多个请求可能同时读写同一个 session，
因此所有读写都在同一把锁内完成，调用方拿到的永远是消息列表的副本。

截断注意：
截断按“消息条数”而不是“问答对数”进行。当 max_messages 为奇数时，
保留下来的历史可能以 AIMessage 开头。
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from langchain_core.chat_history import InMemoryChatMessageHistory
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from toolchat.config import DEFAULT_HISTORY_MAX_LENGTH


class SessionStore:
    """
    线程安全的会话历史存储。

    示例：
    ```python
    store = SessionStore(max_messages=10)
    store.append("s1", "hi", "hello")
    store.get("s1")  # [HumanMessage(content="hi"), AIMessage(content="hello")]
    ```
    """

    def __init__(self, max_messages: int = DEFAULT_HISTORY_MAX_LENGTH):
        if max_messages <= 0:
            max_messages = DEFAULT_HISTORY_MAX_LENGTH
        self.max_messages = max_messages
        self._lock = threading.Lock()
        # 结构: {session_id: InMemoryChatMessageHistory}
        self._store: Dict[str, InMemoryChatMessageHistory] = {}

    def get(self, session_id: Optional[str]) -> List[BaseMessage]:
        """返回指定 session 的历史消息副本；session 不存在或为空时返回空列表。"""
        if not session_id:
            return []
        with self._lock:
            history = self._store.get(session_id)
            return list(history.messages) if history is not None else []

    def append(self, session_id: Optional[str], user_message: str, assistant_message: str) -> None:
        """
        追加一轮问答（先 HumanMessage 后 AIMessage），随后截断到 max_messages 条。

        session_id 或 assistant_message 为空时不做任何修改。
        """
        if not session_id or not assistant_message:
            return
        with self._lock:
            history = self._store.get(session_id)
            if history is None:
                history = self._store[session_id] = InMemoryChatMessageHistory()
            history.add_messages([
                HumanMessage(content=user_message),
                AIMessage(content=assistant_message),
            ])
            if len(history.messages) > self.max_messages:
                history.messages = history.messages[-self.max_messages:]

    def clear(self, session_id: str) -> None:
        """清空指定 Session 的历史。"""
        with self._lock:
            self._store.pop(session_id, None)

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
