"""
Request body validation.

Each named schema maps to a pydantic model that both checks and
normalizes the input (strings trimmed, descriptions lower-cased, numeric
strings coerced). A failure becomes ``ValidationError`` carrying one
entry per failed field, so the request never reaches its handler.
"""

from typing import Any, Iterable, List

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from recipe_api.exceptions import ValidationError
from recipe_api.models.recipe_model import CommentIn, RatingIn, RecipeIn, RecipeUpdate
from recipe_api.models.user_model import UserLogin, UserRegister

SCHEMAS = {
    "create-recipe": RecipeIn,
    "update-recipe": RecipeUpdate,
    "comment": CommentIn,
    "rating": RatingIn,
    "register": UserRegister,
    "login": UserLogin,
}


def violations(errors: Iterable[dict]) -> List[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        }
        for err in errors
    ]


def validate(schema: str, payload: Any) -> BaseModel:
    model = SCHEMAS[schema]
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(data=violations(exc.errors()))


def validated_body(schema: str):
    """Dependency factory: parse the JSON body and validate it against ``schema``."""
    if schema not in SCHEMAS:
        raise KeyError(f"Unknown schema: {schema}")

    async def dependency(request: Request) -> BaseModel:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError(
                data=[{"field": "body", "message": "Request body must be valid JSON", "type": "json_invalid"}]
            )
        body = validate(schema, payload)
        request.state.body = body
        return body

    return dependency
