from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import jwt

BCRYPT_ROUNDS = 10
DEFAULT_ALGORITHM = "HS256"
DEFAULT_EXPIRE_MINUTES = 120

# Registered claims owned by the signer; never part of the user payload
REGISTERED_CLAIMS = ("sub", "iat", "exp")


class PasswordHasher:
    """Salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # stored value is not a hash passlib recognises
            return False

    def dummy_verify(self) -> None:
        self._context.dummy_verify()


class TokenIssuer:
    """
    Signs and verifies JWTs carrying user identity claims.

    Args:
        secret: Shared HMAC signing secret
        algorithm: JWT signing algorithm
        expire_minutes: Lifetime of every issued token
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @staticmethod
    def strip_registered_claims(claims: dict) -> dict:
        return {key: value for key, value in claims.items() if key not in REGISTERED_CLAIMS}

    def sign(self, payload: dict) -> str:
        now = datetime.now(timezone.utc)
        claims = self.strip_registered_claims(payload)
        claims["iat"] = now
        claims["exp"] = now + timedelta(minutes=self.expire_minutes)
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """
        Decode a token, checking its signature and expiry.

        Returns:
            The full claim set, registered claims included

        Raises:
            jwt.PyJWTError: if the token is malformed, tampered with or expired
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            options={"require": ["exp"]},
        )
