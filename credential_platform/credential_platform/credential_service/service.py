"""Credential operations: register, login, and verify-and-reissue."""
import logging

import jwt
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .auth import PasswordHasher, TokenIssuer
from .db import UserStore
from .errors import AlreadyExists, CredentialServiceError, InvalidCredentials, InvalidToken
from .schemas import AuthResult, LoginRequest, RegisterRequest, UserOut
from .utils.event_logger import log_auth_event

logger = logging.getLogger(__name__)


class CredentialService:
    """Coordinate the user store, password hasher and token issuer."""

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenIssuer):
        self._store = store
        self._hasher = hasher
        self._tokens = tokens

    def _issue(self, user: dict) -> AuthResult:
        return AuthResult(user=UserOut(**user), token=self._tokens.sign(user))

    def register(self, request: RegisterRequest) -> AuthResult:
        """
        Create a user and sign a token for it.

        Raises:
            AlreadyExists: if the email is taken
            CredentialServiceError: on any other failure, carrying its message
        """
        try:
            if self._store.find_by_email(request.email) is not None:
                raise AlreadyExists()
            user = self._store.create_user(
                email=request.email,
                name=request.name,
                password_hash=self._hasher.hash(request.password),
            )
        except AlreadyExists:
            log_auth_event("register_failure", email=request.email, reason="duplicate email")
            raise
        except IntegrityError as e:
            # lost a race with a concurrent registration for the same email
            logger.debug("Unique constraint rejected %s: %s", request.email, e.orig)
            log_auth_event("register_failure", email=request.email, reason="duplicate email")
            raise AlreadyExists() from e
        except SQLAlchemyError as e:
            log_auth_event("register_failure", email=request.email, reason="store error")
            raise CredentialServiceError(str(e)) from e
        except Exception as e:
            log_auth_event("register_failure", email=request.email, reason=type(e).__name__)
            raise CredentialServiceError(str(e)) from e

        log_auth_event("register_success", email=user.email, user_id=user.id)
        return self._issue(user.to_dict())

    def login(self, request: LoginRequest) -> AuthResult:
        """
        Check a password against the stored hash and sign a token.

        Unknown emails and wrong passwords raise the same InvalidCredentials.
        """
        try:
            user = self._store.find_by_email(request.email)
        except SQLAlchemyError as e:
            raise CredentialServiceError(str(e)) from e

        if user is None:
            # same bcrypt cost as a real mismatch
            self._hasher.dummy_verify()
        if user is None or not self._hasher.verify(request.password, user.password):
            log_auth_event("login_failure", email=request.email, user_id=user.id if user else None)
            raise InvalidCredentials()

        log_auth_event("login_success", email=user.email, user_id=user.id)
        return self._issue(user.to_dict())

    def verify_token(self, token: str) -> AuthResult:
        """
        Verify a token and reissue it with a fresh expiry.

        Expired, tampered and malformed tokens all raise InvalidToken.
        """
        try:
            claims = self._tokens.verify(token)
            payload = self._tokens.strip_registered_claims(claims)
            result = self._issue(payload)
        except jwt.PyJWTError as e:
            log_auth_event("token_invalid", reason=type(e).__name__)
            raise InvalidToken() from e
        except (ValidationError, TypeError) as e:
            # signed with our secret but not describing a user
            log_auth_event("token_invalid", reason="unexpected claims")
            raise InvalidToken() from e
        except Exception as e:
            logger.exception("Unexpected error while verifying token")
            raise InvalidToken() from e

        log_auth_event("token_refreshed", email=result.user.email, user_id=result.user.id)
        return result
