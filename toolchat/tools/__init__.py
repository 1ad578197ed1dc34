"""
工具模块（中文注释）。

导出的工具：
- GeneralQuestionAnswerTool: 通用问答（再次调用 LLM）
- CurrentWeatherTool: 天气（占位实现）
- AgeGuessTool / GenderGuessTool: 基于 agify.io / genderize.io 的姓名推测
- RecipeTool: 结构化菜谱生成

build_tool_registry 在启动时构建一次固定的工具表，之后只读。
"""

from typing import Dict

from langchain_core.language_models import BaseChatModel
from langchain_core.tools import BaseTool

from toolchat.config import AppConfig
from toolchat.tools.general_qa import GeneralQuestionAnswerTool, create_general_question_answer_tool
from toolchat.tools.name_guess import (
    AgeGuessTool,
    GenderGuessTool,
    create_age_guess_tool,
    create_gender_guess_tool,
)
from toolchat.tools.recipe import Recipe, RecipeTool, create_recipe_tool
from toolchat.tools.weather import CurrentWeatherTool, create_current_weather_tool


def build_tool_registry(cfg: AppConfig, llm: BaseChatModel) -> Dict[str, BaseTool]:
    """按固定顺序创建全部工具，返回 {工具名: 工具实例}。"""
    tools = [
        create_general_question_answer_tool(llm),
        create_current_weather_tool(),
        create_age_guess_tool(api_url=cfg.tools.agify_url, timeout=cfg.tools.http_timeout),
        create_gender_guess_tool(api_url=cfg.tools.genderize_url, timeout=cfg.tools.http_timeout),
        create_recipe_tool(llm),
    ]
    return {tool.name: tool for tool in tools}


__all__ = [
    "build_tool_registry",
    "GeneralQuestionAnswerTool",
    "CurrentWeatherTool",
    "AgeGuessTool",
    "GenderGuessTool",
    "Recipe",
    "RecipeTool",
]
