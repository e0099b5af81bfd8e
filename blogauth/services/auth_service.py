import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from blogauth.core.errors import (
    EmailExists,
    EmailNotFound,
    GoogleAccountSignin,
    IncorrectPassword,
    InternalError,
    UsernameExists,
)
from blogauth.core.security import create_access_token, hash_password, verify_password
from blogauth.models.user import AuthResponse, User, UserCreate
from blogauth.services.username_service import generate_username
from blogauth.services.validation import validate_signup

logger = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


def format_auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user.id),
        profile_img=user.profile_img,
        username=user.username,
        fullname=user.fullname,
    )


# Index name (postgres) or table.column (sqlite) of the username constraint
USERNAME_CONSTRAINT_MARKERS = ("ix_users_username", "users.username")


def _conflict_for(exc: IntegrityError) -> EmailExists | UsernameExists:
    """Pick the conflict variant from the violated unique index."""
    message = str(exc.orig)
    if any(marker in message for marker in USERNAME_CONSTRAINT_MARKERS):
        return UsernameExists()
    return EmailExists()


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    hashed = await run_in_threadpool(hash_password, data.password)
    username = await generate_username(session, data.email)
    user = User(
        fullname=data.fullname,
        email=data.email,
        username=username,
        hashed_password=hashed,
        google_auth=False,
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def signup_user(
    session: AsyncSession, fullname: str, email: str, password: str
) -> AuthResponse:
    validate_signup(fullname, email, password)
    try:
        user = await create_user(
            session, UserCreate(fullname=fullname, email=email, password=password)
        )
    except IntegrityError as e:
        logger.info("Signup conflict for %s: %s", email, e.orig)
        raise _conflict_for(e) from e
    except SQLAlchemyError as e:
        logger.exception("Signup failed for %s", email)
        raise InternalError(str(e)) from e
    logger.info("Signed up user_id=%s username=%s", user.id, user.username)
    return format_auth_response(user)


async def signin_user(session: AsyncSession, email: str, password: str) -> AuthResponse:
    try:
        user = await get_user_by_email(session, email)
    except SQLAlchemyError as e:
        logger.exception("Signin lookup failed for %s", email)
        raise InternalError(str(e)) from e
    if not user:
        raise EmailNotFound()
    if not user.hashed_password:
        raise GoogleAccountSignin()
    if not await run_in_threadpool(verify_password, password, user.hashed_password):
        logger.warning("Incorrect password for user_id=%s", user.id)
        raise IncorrectPassword()
    return format_auth_response(user)
