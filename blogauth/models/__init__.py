from blogauth.models.user import AuthResponse, User, UserCreate

__all__ = [
    "AuthResponse",
    "User",
    "UserCreate",
]
