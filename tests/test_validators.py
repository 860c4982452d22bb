import pytest

from recipe_api.exceptions import ValidationError
from recipe_api.models.recipe_model import RecipeIn
from recipe_api.utils.validators import validate


def _fields(exc_info) -> set:
    return {v["field"] for v in exc_info.value.data}


def test_create_recipe_normalizes_strings_and_numbers(recipe_payload):
    body = validate(
        "create-recipe",
        recipe_payload(
            title="  Pepper Steak  ",
            description="  A QUICK Weeknight Steak ",
            prepTimeInMinutes="10",
        ),
    )

    assert isinstance(body, RecipeIn)
    assert body.title == "Pepper Steak"
    assert body.description == "a quick weeknight steak"
    assert body.prepTimeInMinutes == 10
    assert body.image is None


def test_create_recipe_reports_every_failed_field(recipe_payload):
    payload = recipe_payload(title="x" * 51)
    del payload["category"]
    del payload["cookTimeInMinutes"]

    with pytest.raises(ValidationError) as exc_info:
        validate("create-recipe", payload)

    assert exc_info.value.status_code == 400
    assert _fields(exc_info) == {"title", "category", "cookTimeInMinutes"}


def test_create_recipe_requires_step_number(recipe_payload):
    payload = recipe_payload(instructions=[{"description": "Stir"}])

    with pytest.raises(ValidationError) as exc_info:
        validate("create-recipe", payload)

    assert _fields(exc_info) == {"instructions.0.stepNumber"}


def test_create_recipe_rejects_unknown_and_owner_fields(recipe_payload):
    with pytest.raises(ValidationError) as exc_info:
        validate("create-recipe", recipe_payload(createdBy="someone-else"))

    assert _fields(exc_info) == {"createdBy"}


def test_description_length_is_checked_after_trimming(recipe_payload):
    body = validate("create-recipe", recipe_payload(description=" " * 10 + "d" * 256 + " " * 10))
    assert len(body.description) == 256


def test_update_recipe_only_keeps_sent_fields():
    body = validate("update-recipe", {"title": " New title ", "cookTimeInMinutes": 20})
    assert body.changes() == {"title": "New title", "cookTimeInMinutes": 20}


def test_comment_body_is_trimmed_and_limited():
    assert validate("comment", {"body": "  tasty!  "}).body == "tasty!"

    with pytest.raises(ValidationError) as exc_info:
        validate("comment", {"body": "a" * 101})
    assert _fields(exc_info) == {"body"}


@pytest.mark.parametrize("value", [0, 6, 2.5, "great", True])
def test_rating_outside_one_to_five_is_rejected(value):
    with pytest.raises(ValidationError) as exc_info:
        validate("rating", {"rating": value})
    assert _fields(exc_info) == {"rating"}


@pytest.mark.parametrize("value", [1, 5, "3"])
def test_rating_inside_range_is_accepted(value):
    assert 1 <= validate("rating", {"rating": value}).rating <= 5


def test_non_object_payload_is_a_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        validate("comment", ["not", "an", "object"])
    assert _fields(exc_info) == {"body"}


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "Infinity", True, False])
def test_numbers_must_be_finite_and_not_booleans(recipe_payload, value):
    with pytest.raises(ValidationError) as exc_info:
        validate("create-recipe", recipe_payload(prepTimeInMinutes=value))
    assert _fields(exc_info) == {"prepTimeInMinutes"}


def test_update_rejects_non_finite_numbers():
    with pytest.raises(ValidationError) as exc_info:
        validate("update-recipe", {"numberOfServings": float("nan")})
    assert _fields(exc_info) == {"numberOfServings"}
