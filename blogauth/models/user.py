from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class UserBase(SQLModel):
    fullname: str
    email: str = Field(unique=True, index=True)
    username: str = Field(unique=True, index=True)
    profile_img: str | None = None
    google_auth: bool = False


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str | None = None  # None for Google-only users
    joined_at: datetime = Field(default_factory=_utc_naive_now)


class UserCreate(SQLModel):
    fullname: str
    email: str
    password: str


class AuthResponse(SQLModel):
    access_token: str
    profile_img: str | None = None
    username: str
    fullname: str
