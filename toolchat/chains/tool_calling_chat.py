"""
工具调用对话链（中文注释）。

功能：
- 把工具表绑定到 LLM，让模型在需要时自主调用
- 执行模型发出的工具调用，把结果作为 ToolMessage 回填，直到得到最终回复

设计思路：
1. 创建工具实例并绑定到 LLM
2. 使用 MessagesPlaceholder 接收历史消息 + 当前问题
3. 处理工具调用：如果 LLM 返回工具调用，则执行工具并将结果添加为 ToolMessage
4. 继续生成最终回复；工具失败只会变成一条 {"error": ...} 结果，不会中断对话

参考：https://python.langchain.com/docs/how_to/tool_calling/
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, ToolMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langchain_core.runnables import Runnable
from langchain_core.tools import BaseTool

from toolchat.chains.basic_chat import message_text
from toolchat.utils.logger import logger


class ToolLoopExhausted(RuntimeError):
    """模型在 max_iterations 轮内仍在请求工具，没有给出最终回复。"""


def create_tool_calling_chain(
    llm: BaseChatModel,
    tools: Mapping[str, BaseTool],
    system_prompt: str,
) -> Runnable:
    """
    创建支持工具调用的对话链。

    返回的链接受输入：{"messages": List[BaseMessage]}
    输出：AIMessage（可能包含工具调用或最终回复）
    """
    llm_with_tools = llm.bind_tools(list(tools.values()))

    logger.debug(f"Tool calling chain system prompt: {system_prompt[:100]}...")

    prompt = ChatPromptTemplate.from_messages([
        ("system", system_prompt),
        MessagesPlaceholder("messages"),
    ])
    return prompt | llm_with_tools


def run_tool(tools: Mapping[str, BaseTool], tool_call: Dict[str, Any], callbacks: Optional[list] = None) -> Any:
    """执行单个工具调用；未知工具或工具内部异常都转换为 {"error": ...}。"""
    tool_name = tool_call["name"]
    tool = tools.get(tool_name)
    if tool is None:
        logger.warning(f"Unknown tool requested: {tool_name}")
        return {"error": f"未知工具: {tool_name}"}
    try:
        return tool.invoke(tool_call.get("args") or {}, config={"callbacks": callbacks} if callbacks else {})
    except Exception as e:
        logger.exception(f"Tool {tool_name} failed: {e}")
        return {"error": f"{tool_name} failed: {e}"}


def process_tool_calls(
    chain: Runnable,
    messages: List[BaseMessage],
    tools: Mapping[str, BaseTool],
    callbacks: Optional[list] = None,
    max_iterations: int = 5,
) -> str:
    """
    处理工具调用迭代，返回最终回复文本。

    算法：
    1. 将当前消息传入链，得到 AIMessage
    2. 检查是否有 tool_calls
    3. 如果有，执行每个工具调用，将结果添加为 ToolMessage，重复步骤1
    4. 如果没有 tool_calls，则返回 AIMessage 的文本

    注意：messages 会被原地追加工具调用过程，调用方如需保留原列表请传入副本。
    """
    config = {"callbacks": callbacks} if callbacks else {}

    for iteration in range(max_iterations):
        logger.debug(f"Iteration {iteration + 1}: Invoking LLM...")
        for i, msg in enumerate(messages):
            logger.debug(f"Chain Input Msg[{i}] ({type(msg).__name__}): {str(msg.content)[:100]}")

        response: AIMessage = chain.invoke({"messages": messages}, config=config)

        if not response.tool_calls:
            logger.debug("No tool calls, final answer received.")
            return message_text(response)

        logger.info(f"Tool calls detected: {len(response.tool_calls)}")
        messages.append(response)  # 添加包含工具调用的 AIMessage
        for tool_call in response.tool_calls:
            logger.info(f"Executing tool: {tool_call['name']} with args: {tool_call.get('args')}")
            tool_result = run_tool(tools, tool_call, callbacks)
            logger.debug(f"Tool result: {str(tool_result)[:200]}")
            messages.append(
                ToolMessage(
                    content=json.dumps(tool_result, ensure_ascii=False, default=str),
                    tool_call_id=tool_call["id"],
                    name=tool_call["name"],
                )
            )

    logger.warning("Max iterations reached, stopping.")
    raise ToolLoopExhausted(f"no final answer after {max_iterations} tool-calling rounds")
