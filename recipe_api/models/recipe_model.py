from datetime import datetime, timezone
from typing import Annotated, Dict, List, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints


def _not_bool(value):
    # JSON true/false would otherwise be read as 1/0
    if isinstance(value, bool):
        raise ValueError("Input should be a valid number")
    return value


def _whole_to_int(value: float):
    # 30 stays 30 in the stored document, 7.5 stays 7.5
    return int(value) if value.is_integer() else value


Number = Annotated[
    float, Field(allow_inf_nan=False), BeforeValidator(_not_bool), AfterValidator(_whole_to_int)
]
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Description = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1, max_length=256)
]
CommentBody = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==================== REQUEST SHAPES ====================

class Ingredient(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Text
    quantity: Optional[Text] = None


class Instruction(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stepNumber: Number
    description: Optional[Text] = None


class RecipeIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Title
    description: Optional[Description] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[Instruction] = Field(default_factory=list)
    prepTimeInMinutes: Number
    cookTimeInMinutes: Number
    numberOfServings: Number
    category: Text
    cuisine: Text
    difficulty: Text
    image: Optional[Text] = None


class RecipeUpdate(BaseModel):
    """Partial update; only the fields a client actually sent are written."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[Title] = None
    description: Optional[Description] = None
    ingredients: Optional[List[Ingredient]] = None
    instructions: Optional[List[Instruction]] = None
    prepTimeInMinutes: Optional[Number] = None
    cookTimeInMinutes: Optional[Number] = None
    numberOfServings: Optional[Number] = None
    category: Optional[Text] = None
    cuisine: Optional[Text] = None
    difficulty: Optional[Text] = None
    image: Optional[Text] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class CommentIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    body: CommentBody


class RatingIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rating: Annotated[int, BeforeValidator(_not_bool)] = Field(..., ge=1, le=5)


# ==================== STORED SUB-DOCUMENTS ====================

class Comment(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    body: str
    commentedBy: ObjectId
    createdAt: datetime = Field(default_factory=utcnow)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Rating(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    rating: int
    ratedBy: ObjectId

    def to_document(self) -> dict:
        return self.model_dump()


class Recipe(BaseModel):
    """
    Comment and rating view of a stored recipe document.

    Comments keep insertion order. Ratings are keyed by author id, so a
    recipe can never hold two ratings from the same user.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: ObjectId
    createdBy: ObjectId
    comments: List[Comment] = Field(default_factory=list)
    ratings: Dict[str, Rating] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: dict) -> "Recipe":
        ratings: Dict[str, Rating] = {}
        for raw in doc.get("ratings") or []:
            rating = Rating.model_validate(raw)
            ratings[str(rating.ratedBy)] = rating
        return cls(
            id=doc["_id"],
            createdBy=doc["createdBy"],
            comments=[Comment.model_validate(c) for c in doc.get("comments") or []],
            ratings=ratings,
        )

    def is_owned_by(self, user_id: ObjectId) -> bool:
        return self.createdBy == user_id

    def add_comment(self, body: str, author: ObjectId) -> Comment:
        comment = Comment(body=body, commentedBy=author)
        self.comments.append(comment)
        return comment

    def find_comment(self, comment_id: ObjectId) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def remove_comment(self, comment_id: ObjectId) -> Optional[Comment]:
        comment = self.find_comment(comment_id)
        if comment is not None:
            self.comments.remove(comment)
        return comment

    def rate(self, value: int, author: ObjectId) -> Rating:
        # drop-then-insert keeps the latest rating at the end of the list
        self.ratings.pop(str(author), None)
        rating = Rating(rating=value, ratedBy=author)
        self.ratings[str(author)] = rating
        return rating

    def average_rating(self) -> float:
        if not self.ratings:
            return 0.0
        values = [r.rating for r in self.ratings.values()]
        return round(sum(values) / len(values), 2)

    def ratings_document(self) -> List[dict]:
        return [r.to_document() for r in self.ratings.values()]
