"""
天气工具（占位实现）。

不请求真实的天气服务，固定返回一段描述，用于演示工具调用流程。
"""

from typing import Type

from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field

from toolchat.utils.logger import logger


class WeatherInput(BaseModel):
    location: str = Field(description="城市或地点名称")


class CurrentWeatherTool(BaseTool):
    name: str = "get_weather"
    description: str = "Gets the current weather in a given location"
    args_schema: Type[BaseModel] = WeatherInput
    return_direct: bool = False

    def _run(self, location: str) -> str:
        logger.info("TOOL CALLED: get_weather, location={}", location)
        return f"The current weather in {location} is 63°F and sunny."


def create_current_weather_tool(**kwargs) -> CurrentWeatherTool:
    return CurrentWeatherTool(**kwargs)
