from pydantic import BaseModel


# Missing fields default to "" so they fail validation instead of the request
class SignupRequest(BaseModel):
    fullname: str = ""
    email: str = ""
    password: str = ""


class SigninRequest(BaseModel):
    email: str = ""
    password: str = ""


class GoogleAuthRequest(BaseModel):
    access_token: str = ""  # Firebase ID token from the client SDK


class ErrorResponse(BaseModel):
    error: str
