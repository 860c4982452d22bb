import logging
import random

from fastapi import APIRouter, Depends
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from recipe_api.database.mongo import get_recipe_collection
from recipe_api.exceptions import ConflictError, NotFoundError
from recipe_api.models.recipe_filter import RecipeFilter
from recipe_api.models.recipe_model import CommentIn, RatingIn, Recipe, RecipeIn, RecipeUpdate, utcnow
from recipe_api.utils.auth_helper import get_current_user, get_owned_recipe
from recipe_api.utils.recipe_helper import comment_helper, find_recipe, parse_object_id, recipe_helper
from recipe_api.utils.responses import GuardedRoute, success
from recipe_api.utils.validators import validated_body

logger = logging.getLogger(__name__)

router = APIRouter(route_class=GuardedRoute)


def _recipe_not_found(recipe_id: str) -> NotFoundError:
    return NotFoundError(f"Recipe with ID: {recipe_id} not found")


def _title_taken(title: str) -> ConflictError:
    return ConflictError(f"Recipe with title: {title} already exists.")


# Tạo công thức mới
@router.post("")
async def create_recipe(
    recipe: RecipeIn = Depends(validated_body("create-recipe")),
    user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
):
    if await recipes.find_one({"title": recipe.title}):
        raise _title_taken(recipe.title)

    now = utcnow()
    doc = recipe.model_dump(exclude_none=True)
    doc.update({
        "createdBy": user["_id"],
        "comments": [],
        "ratings": [],
        "createdAt": now,
        "updatedAt": now,
    })
    try:
        result = await recipes.insert_one(doc)
    except DuplicateKeyError:
        # lost the race against a concurrent create, the unique index caught it
        raise _title_taken(recipe.title)

    doc["_id"] = result.inserted_id
    logger.info("recipe %s created by %s", result.inserted_id, user["_id"])
    return success("Recipe created", recipe_helper(doc), status_code=201)


# Danh sách công thức (có lọc)
@router.get("")
async def list_recipes(filters: RecipeFilter = Depends(), recipes=Depends(get_recipe_collection)):
    query = filters.to_query()

    if filters.wants_random():
        count = await recipes.count_documents(query)
        if count == 0:
            raise NotFoundError("No recipe matches the given filters")
        index = random.randrange(count)
        docs = await recipes.find(query, skip=index, limit=1).to_list(length=1)
        if not docs:
            # collection shrank between the count and the pick
            raise NotFoundError("No recipe matches the given filters")
        return success("Fetched Random Recipe successfully", recipe_helper(docs[0]))

    docs = await recipes.find(query).to_list(length=None)
    return success(
        "Fetched Recipes successfully",
        [recipe_helper(d) for d in docs],
        count=len(docs),
    )


# Lấy công thức theo ID
@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    _user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
):
    doc = await find_recipe(recipes, recipe_id)
    if doc is None:
        raise _recipe_not_found(recipe_id)
    return success("Fetched recipe successfully", recipe_helper(doc))


@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    changes: RecipeUpdate = Depends(validated_body("update-recipe")),
    recipe: dict = Depends(get_owned_recipe),
    recipes=Depends(get_recipe_collection),
):
    fields = changes.changes()
    title = fields.get("title")
    if title and title != recipe["title"]:
        if await recipes.find_one({"title": title, "_id": {"$ne": recipe["_id"]}}):
            raise _title_taken(title)

    fields["updatedAt"] = utcnow()
    try:
        updated = await recipes.find_one_and_update(
            {"_id": recipe["_id"]},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise _title_taken(title or recipe["title"])

    if updated is None:
        raise _recipe_not_found(recipe_id)
    return success("Recipe updated successfully", recipe_helper(updated))


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: str,
    recipe: dict = Depends(get_owned_recipe),
    recipes=Depends(get_recipe_collection),
):
    result = await recipes.delete_one({"_id": recipe["_id"]})
    if result.deleted_count == 0:
        raise _recipe_not_found(recipe_id)
    logger.info("recipe %s deleted", recipe_id)
    return success("Recipe deleted successfully")


# Bình luận
@router.post("/{recipe_id}/comments")
async def add_comment(
    recipe_id: str,
    payload: CommentIn = Depends(validated_body("comment")),
    user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
):
    doc = await find_recipe(recipes, recipe_id)
    if doc is None:
        raise _recipe_not_found(recipe_id)

    comment = Recipe.from_document(doc).add_comment(payload.body, user["_id"])
    result = await recipes.update_one(
        {"_id": doc["_id"]},
        {"$push": {"comments": comment.to_document()}},
    )
    if result.matched_count == 0:
        raise _recipe_not_found(recipe_id)
    return success("Comment added successfully", comment_helper(comment))


@router.delete("/{recipe_id}/comments/{comment_id}")
async def delete_comment(
    recipe_id: str,
    comment_id: str,
    _user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
):
    doc = await find_recipe(recipes, recipe_id)
    if doc is None:
        raise _recipe_not_found(recipe_id)

    cid = parse_object_id(comment_id)
    if cid is None or Recipe.from_document(doc).remove_comment(cid) is None:
        raise NotFoundError(f"Comment with ID: {comment_id} was not found.")

    await recipes.update_one({"_id": doc["_id"]}, {"$pull": {"comments": {"_id": cid}}})
    return success("Comment deleted successfully")


# Đánh giá công thức (thêm sao)
@router.post("/{recipe_id}/ratings")
async def rate_recipe(
    recipe_id: str,
    payload: RatingIn = Depends(validated_body("rating")),
    user: dict = Depends(get_current_user),
    recipes=Depends(get_recipe_collection),
):
    doc = await find_recipe(recipes, recipe_id)
    if doc is None:
        raise _recipe_not_found(recipe_id)

    recipe = Recipe.from_document(doc)
    recipe.rate(payload.rating, user["_id"])
    await recipes.update_one(
        {"_id": doc["_id"]},
        {"$set": {"ratings": recipe.ratings_document()}},
    )
    return success(
        "Recipe rated successfully",
        {"averageRating": recipe.average_rating(), "ratingsCount": len(recipe.ratings)},
    )
