"""
对话链模块（中文注释）。

导出：
1. 基础组件：
   - build_llm: 按 provider 创建 ChatOpenAI
   - build_callbacks: Langfuse 回调（按需开启）

2. 工具调用链：
   - create_tool_calling_chain: 创建绑定工具的链
   - process_tool_calls: 执行工具调用迭代，返回最终回复

对话编排器 ChatFlow 位于 toolchat.chains.chat_flow（依赖工具模块，这里不做导出）。
"""

from toolchat.chains.basic_chat import (
    build_callbacks,
    build_llm,
    generate_text,
)
from toolchat.chains.tool_calling_chat import (
    ToolLoopExhausted,
    create_tool_calling_chain,
    process_tool_calls,
)

__all__ = [
    # 基础组件
    "build_callbacks",
    "build_llm",
    "generate_text",
    # 工具调用链
    "ToolLoopExhausted",
    "create_tool_calling_chain",
    "process_tool_calls",
]
