"""Error taxonomy for the auth flows.

Every failure a flow can report is one of the classes below. Each carries the
HTTP status it maps to and a user-facing message; services raise them and
only ``to_http`` turns them into a transport response.
"""


class AuthError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# --- Validation (403) ---

class ValidationError(AuthError):
    status_code = 403


class NameTooShort(ValidationError):
    message = "Fullname must be at least 3 letters long"


class EmailMissing(ValidationError):
    message = "Enter the email"


class EmailInvalid(ValidationError):
    message = "Invalid email"


class PasswordWeak(ValidationError):
    message = "Password should be 6 to 20 characters long with a numeric, 1 lowercase, and 1 uppercase"


# --- Conflicts (500, as the original server answered) ---

class ConflictError(AuthError):
    status_code = 500


class EmailExists(ConflictError):
    message = "Email already exists"


class UsernameExists(ConflictError):
    message = "Username already exists"


# --- Signin (403) ---

class NotFoundError(AuthError):
    status_code = 403


class EmailNotFound(NotFoundError):
    message = "Email not found"


class CredentialMismatch(AuthError):
    status_code = 403


class IncorrectPassword(CredentialMismatch):
    message = "Incorrect password"


class GoogleAccountSignin(CredentialMismatch):
    message = "Account was created using Google. Try signing in with Google."


# --- Federated (500) ---

class FederatedVerificationError(AuthError):
    status_code = 500


class TokenInvalid(FederatedVerificationError):
    message = "Failed to authenticate you with Google. Try with another Google account."


class InternalError(AuthError):
    status_code = 500


def to_http(exc: AuthError) -> tuple[int, dict[str, str]]:
    """Map an auth error to (status code, JSON body)."""
    return exc.status_code, {"error": exc.message}
