from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogauth.api.deps import get_identity_provider, get_session
from blogauth.api.schemas.auth import (
    ErrorResponse,
    GoogleAuthRequest,
    SigninRequest,
    SignupRequest,
)
from blogauth.models.user import AuthResponse
from blogauth.services.auth_service import signin_user, signup_user
from blogauth.services.google_auth_service import IdentityProvider, google_auth

router = APIRouter(tags=["auth"])

_ERROR_RESPONSES = {
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/signup", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
) -> AuthResponse:
    return await signup_user(session, body.fullname, body.email, body.password)


@router.post("/signin", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def signin(
    body: SigninRequest,
    session: AsyncSession = Depends(get_session),
) -> AuthResponse:
    return await signin_user(session, body.email, body.password)


@router.post("/google-auth", response_model=AuthResponse, responses={500: {"model": ErrorResponse}})
async def google_auth_route(
    body: GoogleAuthRequest,
    session: AsyncSession = Depends(get_session),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> AuthResponse:
    return await google_auth(session, provider, body.access_token)
