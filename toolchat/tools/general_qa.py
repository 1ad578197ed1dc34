"""
通用问答工具（中文注释）。

功能：
- 把问题原样交给同一个 LLM（不带 system prompt 和会话历史）
- 让主对话在需要“单独回答一个子问题”时可以调用
"""

from typing import Optional, Type

from langchain_core.callbacks import CallbackManagerForToolRun
from langchain_core.language_models import BaseChatModel
from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field

from toolchat.chains.basic_chat import generate_text
from toolchat.utils.logger import logger


class GeneralQuestionInput(BaseModel):
    question: str = Field(description="要回答的问题")


class GeneralQuestionAnswerTool(BaseTool):
    name: str = "general_question_answer"
    description: str = "Answers any general questions"
    args_schema: Type[BaseModel] = GeneralQuestionInput
    return_direct: bool = False

    llm: BaseChatModel

    def _run(self, question: str, run_manager: Optional[CallbackManagerForToolRun] = None) -> str:
        logger.info("TOOL CALLED: general_question_answer, question={}", question)
        callbacks = run_manager.get_child() if run_manager else None
        return generate_text(self.llm, question, callbacks=callbacks)


def create_general_question_answer_tool(llm: BaseChatModel) -> GeneralQuestionAnswerTool:
    return GeneralQuestionAnswerTool(llm=llm)
