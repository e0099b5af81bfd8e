import logging
from dataclasses import dataclass
from typing import Protocol

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only
from starlette.concurrency import run_in_threadpool

from blogauth.core.config import Settings
from blogauth.core.errors import InternalError, TokenInvalid
from blogauth.models.user import AuthResponse, User
from blogauth.services.auth_service import format_auth_response
from blogauth.services.username_service import generate_username

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "blogauth"

# Google serves avatars at 96px by default; ask for 384px instead
LOW_RES_PICTURE_MARKER = "s96-c"
HIGH_RES_PICTURE_MARKER = "s384-c"


@dataclass
class GoogleClaims:
    email: str
    name: str | None = None
    picture: str | None = None


class IdentityProvider(Protocol):
    async def verify(self, id_token: str) -> GoogleClaims: ...


class FirebaseIdentityProvider:
    """Verifies Firebase ID tokens issued for Google sign-in."""

    def __init__(self, settings: Settings) -> None:
        options = {}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id
        cred = None
        if settings.firebase_credentials_path:
            cred = credentials.Certificate(settings.firebase_credentials_path)
        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            self._app = firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)

    async def verify(self, id_token: str) -> GoogleClaims:
        if not id_token:
            raise TokenInvalid()
        try:
            decoded = await run_in_threadpool(firebase_auth.verify_id_token, id_token, app=self._app)
        except Exception as e:
            # Invalid, expired or revoked token, or certificate fetch failure
            logger.warning("Firebase token verification failed: %s", e)
            raise TokenInvalid() from e
        email = decoded.get("email")
        if not email:
            logger.warning("Firebase token has no email claim (uid=%s)", decoded.get("uid"))
            raise TokenInvalid()
        return GoogleClaims(email=email, name=decoded.get("name"), picture=decoded.get("picture"))


def normalize_picture_url(picture: str | None) -> str | None:
    if picture is None:
        return None
    # First occurrence only
    return picture.replace(LOW_RES_PICTURE_MARKER, HIGH_RES_PICTURE_MARKER, 1)


async def get_user_public_fields(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User)
        .where(User.email == email)
        .options(
            load_only(
                User.fullname,
                User.email,
                User.username,
                User.profile_img,
                User.google_auth,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_or_create_google_user(session: AsyncSession, claims: GoogleClaims) -> User:
    profile_img = normalize_picture_url(claims.picture)
    username = await generate_username(session, claims.email)

    user = await get_user_public_fields(session, claims.email)
    if not user:
        user = User(
            fullname=claims.name or claims.email.split("@")[0],
            email=claims.email,
            username=username,
            profile_img=profile_img,
            hashed_password=None,
            google_auth=True,
        )
        logger.info("Creating Google account for %s (username=%s)", claims.email, username)

    # Existing rows are saved unchanged, so this is a no-op for them
    session.add(user)
    await session.flush()
    return user


async def google_auth(
    session: AsyncSession, provider: IdentityProvider, id_token: str
) -> AuthResponse:
    claims = await provider.verify(id_token)
    try:
        user = await get_or_create_google_user(session, claims)
    except SQLAlchemyError as e:
        logger.exception("Google auth storage failure for %s", claims.email)
        raise InternalError(str(e)) from e
    return format_auth_response(user)
