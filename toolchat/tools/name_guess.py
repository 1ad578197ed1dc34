"""
姓名推测工具（中文注释）

功能：
- guess_age：调用 agify.io，根据名字推测年龄
- guess_gender：调用 genderize.io，根据名字推测性别及概率

错误处理：
第三方接口不可达、超时、返回非 2xx 或 JSON 无法解析时，不抛异常，
而是返回 {"error": "..."}，交给 LLM 决定如何在回答中说明。

参考：https://agify.io/ 、https://genderize.io/
"""

import json
from abc import abstractmethod
from typing import Any, Dict, Type, Union

import requests
from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field

from toolchat.config import DEFAULT_TOOL_HTTP_TIMEOUT
from toolchat.utils.logger import logger


class NameInput(BaseModel):
    name: str = Field(description="人名（名字部分）")


class NameApiTool(BaseTool):
    """
    按名字查询第三方公开 API 的工具基类。

    子类只需要提供 api_url 默认值并实现 _format。
    """

    args_schema: Type[BaseModel] = NameInput
    return_direct: bool = False

    api_url: str
    timeout: float = DEFAULT_TOOL_HTTP_TIMEOUT

    def _fetch(self, name: str) -> Dict[str, Any]:
        logger.debug(f"Calling {self.api_url} with name={name}, timeout={self.timeout}")
        try:
            response = requests.get(self.api_url, params={"name": name}, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.Timeout:
            logger.error(f"{self.name} API timeout: {self.api_url}")
            return {"error": f"{self.name} 请求超时"}
        except json.JSONDecodeError:
            logger.error(f"{self.name} API returned invalid JSON")
            return {"error": "failed to decode response"}
        except requests.exceptions.RequestException as e:
            logger.error(f"{self.name} API error: {e}")
            return {"error": f"failed to call {self.name} API: {e}"}

        if not isinstance(result, dict):
            return {"error": "failed to decode response"}
        logger.debug(f"{self.name} API raw response: {result}")
        return result

    def _run(self, name: str) -> Any:
        logger.info("TOOL CALLED: {}, name={}", self.name, name)
        result = self._fetch(name)
        if "error" in result:
            return result
        return self._format(result)

    @abstractmethod
    def _format(self, result: Dict[str, Any]) -> Any:
        """把接口返回的 JSON 转成交给 LLM 的结果。"""


class AgeGuessTool(NameApiTool):
    name: str = "guess_age"
    description: str = "Guesses the age of a person based on their name"
    api_url: str = "https://api.agify.io/"

    def _format(self, result: Dict[str, Any]) -> Union[int, Dict[str, str]]:
        age = result.get("age")
        if age is None:
            return {"error": f"no age estimate available for {result.get('name')!r}"}
        return int(age)


class GenderGuessTool(NameApiTool):
    name: str = "guess_gender"
    description: str = "Guesses the gender of a person based on their name"
    api_url: str = "https://api.genderize.io/"

    def _format(self, result: Dict[str, Any]) -> Union[str, Dict[str, str]]:
        gender = result.get("gender")
        if not gender:
            return {"error": f"no gender estimate available for {result.get('name')!r}"}
        probability = float(result.get("probability") or 0.0)
        return f"{gender} (with probability {probability:.2f})"


def create_age_guess_tool(**kwargs) -> AgeGuessTool:
    return AgeGuessTool(**kwargs)


def create_gender_guess_tool(**kwargs) -> GenderGuessTool:
    return GenderGuessTool(**kwargs)
