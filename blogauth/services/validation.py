import re

from blogauth.core.errors import EmailInvalid, EmailMissing, NameTooShort, PasswordWeak

MIN_FULLNAME_LENGTH = 3

EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+", re.ASCII)
# 6 to 20 characters with at least one digit, one lowercase and one uppercase letter
PASSWORD_PATTERN = re.compile(r"(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,20}", re.ASCII)


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_strong_password(password: str) -> bool:
    return PASSWORD_PATTERN.fullmatch(password) is not None


def validate_signup(fullname: str, email: str, password: str) -> None:
    """Raise the first validation failure for a signup request.

    Order matters: only the first failing check is reported.
    """
    if len(fullname) < MIN_FULLNAME_LENGTH:
        raise NameTooShort()
    if not email:
        raise EmailMissing()
    if not is_valid_email(email):
        raise EmailInvalid()
    if not is_strong_password(password):
        raise PasswordWeak()
