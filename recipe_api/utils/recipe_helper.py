from typing import Optional

from bson import ObjectId

from recipe_api.models.recipe_model import Comment, Rating, Recipe

RECIPE_FIELDS = [
    "title",
    "description",
    "ingredients",
    "instructions",
    "prepTimeInMinutes",
    "cookTimeInMinutes",
    "numberOfServings",
    "category",
    "cuisine",
    "difficulty",
    "image",
    "createdAt",
    "updatedAt",
]


def parse_object_id(value: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


async def find_recipe(recipes, recipe_id: str) -> Optional[dict]:
    oid = parse_object_id(recipe_id)
    if oid is None:
        # a malformed id can't exist in the store, same outcome as not found
        return None
    return await recipes.find_one({"_id": oid})


def comment_helper(comment: Comment) -> dict:
    return {
        "id": str(comment.id),
        "body": comment.body,
        "commentedBy": str(comment.commentedBy),
        "createdAt": comment.createdAt,
    }


def rating_helper(rating: Rating) -> dict:
    return {"rating": rating.rating, "ratedBy": str(rating.ratedBy)}


def recipe_helper(doc: dict) -> dict:
    recipe = Recipe.from_document(doc)
    out = {"id": str(doc["_id"])}
    for field in RECIPE_FIELDS:
        out[field] = doc.get(field)
    out["ingredients"] = doc.get("ingredients") or []
    out["instructions"] = doc.get("instructions") or []
    out["createdBy"] = str(recipe.createdBy)
    out["comments"] = [comment_helper(c) for c in recipe.comments]
    out["ratings"] = [rating_helper(r) for r in recipe.ratings.values()]
    out["averageRating"] = recipe.average_rating()
    return out
