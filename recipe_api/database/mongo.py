import logging

import motor.motor_asyncio
from fastapi import Request

from recipe_api.config import Settings

logger = logging.getLogger(__name__)

RECIPES = "recipes"
USERS = "users"


def connect(settings: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    return motor.motor_asyncio.AsyncIOMotorClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
    )


async def ensure_indexes(db) -> None:
    # title uniqueness backs the read-before-write check in create/update
    await db[RECIPES].create_index("title", unique=True)
    await db[RECIPES].create_index("category")
    await db[RECIPES].create_index("difficulty")
    await db[USERS].create_index("email", unique=True)
    logger.info("indexes ensured")


def get_db(request: Request):
    db = request.app.state.db
    if db is None:
        raise RuntimeError("MongoDB is not initialized yet.")
    return db


def get_recipe_collection(request: Request):
    return get_db(request)[RECIPES]


def get_users_collection(request: Request):
    return get_db(request)[USERS]
