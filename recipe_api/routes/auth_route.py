# Tạo ra token để xác nhận người dùng đã đăng nhập thành công, và dùng token này để truy cập các route cần xác thực
# The token only carries the user id (sub) and an expiry, signed with the configured secret

import logging

from fastapi import APIRouter, Depends
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError

from recipe_api.auth.jwt_handler import create_token
from recipe_api.config import Settings, get_app_settings
from recipe_api.database.mongo import get_users_collection
from recipe_api.exceptions import AuthenticationError, ConflictError
from recipe_api.models.recipe_model import utcnow
from recipe_api.models.user_model import UserLogin, UserRegister
from recipe_api.utils.auth_helper import get_current_user
from recipe_api.utils.responses import GuardedRoute, success
from recipe_api.utils.user_helper import user_helper
from recipe_api.utils.validators import validated_body

logger = logging.getLogger(__name__)

router = APIRouter(route_class=GuardedRoute)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password):
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    return pwd_context.verify(plain, hashed)


@router.post("/register")
async def register(
    user: UserRegister = Depends(validated_body("register")),
    users=Depends(get_users_collection),
):
    email = user.email.lower()
    if await users.find_one({"email": email}):
        raise ConflictError("Email already registered")

    doc = {
        "email": email,
        "username": user.username,
        "password": get_password_hash(user.password),
        "createdAt": utcnow(),
    }
    try:
        result = await users.insert_one(doc)
    except DuplicateKeyError:
        raise ConflictError("Email already registered")

    doc["_id"] = result.inserted_id
    logger.info("user %s registered", result.inserted_id)
    return success("User registered", user_helper(doc), status_code=201)


@router.post("/login")
async def login(
    credentials: UserLogin = Depends(validated_body("login")),
    users=Depends(get_users_collection),
    settings: Settings = Depends(get_app_settings),
):
    found = await users.find_one({"email": credentials.email.lower()})
    # one message for unknown email and wrong password
    if not found or not verify_password(credentials.password, found["password"]):
        raise AuthenticationError("Invalid credentials")

    token = create_token(str(found["_id"]), settings)
    return success("Logged in successfully", {"token": token, "user": user_helper(found)})


@router.get("/me")
async def me(user: dict = Depends(get_current_user)):
    return success("Fetched current user successfully", user_helper(user))
