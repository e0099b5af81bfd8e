from functools import lru_cache

from blogauth.core.config import settings
from blogauth.core.db import get_session
from blogauth.services.google_auth_service import FirebaseIdentityProvider, IdentityProvider

__all__ = ["get_identity_provider", "get_session"]


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """Process-wide Firebase verifier, created on first use."""
    return FirebaseIdentityProvider(settings)
