import secrets
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogauth.models.user import User

USERNAME_SUFFIX_ALPHABET = string.ascii_letters + string.digits + "_-"
USERNAME_SUFFIX_LENGTH = 5


def random_suffix(length: int = USERNAME_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(USERNAME_SUFFIX_ALPHABET) for _ in range(length))


async def username_exists(session: AsyncSession, username: str) -> bool:
    result = await session.execute(select(User.id).where(User.username == username))
    return result.first() is not None


async def generate_username(session: AsyncSession, email: str) -> str:
    """Derive a handle from the email local-part, suffixed if already taken.

    The suffixed name is not re-checked; the unique index on users.username
    rejects the rare collision at insert time.
    """
    username = email.split("@")[0]
    if await username_exists(session, username):
        username += random_suffix()
    return username
