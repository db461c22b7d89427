from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    name: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class VerifyTokenRequest(BaseModel):
    token: str


class UserOut(BaseModel):
    """User as returned to callers; there is no password field."""
    id: str
    email: str
    name: str


class AuthResult(BaseModel):
    user: UserOut
    token: str


class ErrorResponse(BaseModel):
    status: int
    message: str
