from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from blogauth.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or malformed hash
        return False


def create_access_token(
    subject: str | int,
    secret_key: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a bearer token carrying only the user id.

    No exp claim is added unless an expiry is passed or configured.
    """
    to_encode: dict = {"id": str(subject)}
    if expires_delta is None and settings.access_token_expire_minutes:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(UTC) + expires_delta
    return jwt.encode(to_encode, secret_key or settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, secret_key: str | None = None) -> str | None:
    try:
        payload = jwt.decode(
            token, secret_key or settings.secret_key, algorithms=[settings.algorithm]
        )
    except JWTError:
        return None
    user_id = payload.get("id")
    return str(user_id) if user_id else None
