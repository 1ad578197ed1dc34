"""
菜谱生成工具（中文注释）。

功能：
- 根据主食材和可选的饮食限制，让 LLM 生成结构化菜谱
- 使用 with_structured_output 直接得到 Recipe 对象，避免手工解析文本
"""

from typing import Any, Dict, List, Optional, Type

from langchain_core.callbacks import CallbackManagerForToolRun
from langchain_core.language_models import BaseChatModel
from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field

from toolchat.utils.logger import logger


RECIPE_PROMPT = (
    "Create a recipe with the following requirements: "
    "Main ingredient: {ingredient} Dietary restrictions: {dietary_restrictions}"
)


class RecipeInput(BaseModel):
    ingredient: str = Field(description="Main ingredient or cuisine type")
    dietary_restrictions: str = Field(default="", description="Any dietary restrictions")


class Recipe(BaseModel):
    title: str
    description: str
    prep_time: str
    cook_time: str
    servings: int
    ingredients: List[str]
    instructions: List[str]
    tips: Optional[List[str]] = None


class RecipeTool(BaseTool):
    name: str = "get_recipe"
    description: str = "Generates a recipe based on main ingredient and dietary restrictions"
    args_schema: Type[BaseModel] = RecipeInput
    return_direct: bool = False

    llm: BaseChatModel

    def _run(
        self,
        ingredient: str,
        dietary_restrictions: str = "",
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> Dict[str, Any]:
        logger.info(
            "TOOL CALLED: get_recipe, ingredient={}, dietary_restrictions={}",
            ingredient,
            dietary_restrictions,
        )
        prompt = RECIPE_PROMPT.format(ingredient=ingredient, dietary_restrictions=dietary_restrictions)
        config = {"callbacks": run_manager.get_child()} if run_manager else {}
        recipe = self.llm.with_structured_output(Recipe).invoke(prompt, config=config)
        if isinstance(recipe, dict):
            recipe = Recipe.model_validate(recipe)
        return recipe.model_dump(exclude_none=True)


def create_recipe_tool(llm: BaseChatModel) -> RecipeTool:
    return RecipeTool(llm=llm)
