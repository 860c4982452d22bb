def user_helper(user) -> dict:
    # password hash never leaves the store layer
    return {
        "id": str(user["_id"]),
        "email": user["email"],
        "username": user.get("username", ""),
    }
