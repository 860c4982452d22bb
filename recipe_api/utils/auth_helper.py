import logging
from typing import Optional

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from recipe_api.auth.jwt_handler import decode_token
from recipe_api.config import Settings, get_app_settings
from recipe_api.database.mongo import get_recipe_collection, get_users_collection
from recipe_api.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from recipe_api.models.recipe_model import Recipe
from recipe_api.utils.recipe_helper import find_recipe

logger = logging.getLogger(__name__)

# auto_error=False: a missing header, another scheme and an empty token all
# arrive here as None and get the same 401 below
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
    users=Depends(get_users_collection),
) -> dict:
    """Resolve the bearer token to a user document (without the password hash)."""
    if credentials is None or not credentials.credentials.strip():
        logger.info("auth rejected: no bearer token on %s", request.url.path)
        raise AuthenticationError()

    try:
        subject = decode_token(credentials.credentials.strip(), settings)
    except AuthenticationError:
        logger.info("auth rejected: token verification failed on %s", request.url.path)
        raise

    user = None
    if ObjectId.is_valid(subject):
        user = await users.find_one({"_id": ObjectId(subject)}, {"password": 0})
    if not user:
        logger.info("auth rejected: no user for token subject %s", subject)
        raise AuthenticationError()

    request.state.user = user
    return user


async def get_owned_recipe(
    recipe_id: str,
    user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
) -> dict:
    """Load the recipe and make sure the caller created it.

    Not found wins over forbidden, so a missing recipe always reads as 404.
    """
    doc = await find_recipe(recipes, recipe_id)
    if doc is None:
        raise NotFoundError(f"Recipe with ID: {recipe_id} not found")
    if not Recipe.from_document(doc).is_owned_by(user["_id"]):
        raise AuthorizationError("You are not allowed to modify this recipe")
    return doc
