import re
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

FALSE_FLAGS = {"false", "0", "no", "off"}

Minutes = Annotated[float, Field(allow_inf_nan=False)]


def _contains(text: str) -> dict:
    # case-insensitive substring, user input is never treated as a pattern
    return {"$regex": re.escape(text), "$options": "i"}


def _between(low: Optional[float], high: Optional[float]) -> dict:
    bounds = {}
    if low is not None:
        bounds["$gte"] = low
    if high is not None:
        bounds["$lte"] = high
    return bounds


class RecipeFilter(BaseModel):
    """Query parameters accepted by GET /recipes, compiled by ``to_query``."""

    category: Optional[str] = None
    difficulty: Optional[str] = None
    title: Optional[str] = None
    cookingTimeLow: Optional[Minutes] = None
    cookingTimeHigh: Optional[Minutes] = None
    minPrepTime: Optional[Minutes] = None
    maxPrepTime: Optional[Minutes] = None
    ingredients: Optional[str] = None
    random: Optional[str] = None

    def wants_random(self) -> bool:
        # "?random" and "?random=true" both count, "?random=false" does not
        if self.random is None:
            return False
        return self.random.strip().lower() not in FALSE_FLAGS

    def ingredient_names(self) -> List[str]:
        if not self.ingredients:
            return []
        return [name.strip() for name in self.ingredients.split(",") if name.strip()]

    def to_query(self) -> dict:
        query = {}
        if self.category:
            query["category"] = self.category
        if self.difficulty:
            query["difficulty"] = self.difficulty
        if self.title:
            query["title"] = _contains(self.title)

        cook_time = _between(self.cookingTimeLow, self.cookingTimeHigh)
        if cook_time:
            query["cookTimeInMinutes"] = cook_time
        prep_time = _between(self.minPrepTime, self.maxPrepTime)
        if prep_time:
            query["prepTimeInMinutes"] = prep_time

        names = self.ingredient_names()
        if names:
            # every name must match at least one ingredient of the recipe
            query["$and"] = [{"ingredients.name": _contains(name)} for name in names]
        return query
