"""
Credential Service - registration, login and token verification over HTTP
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .auth import BCRYPT_ROUNDS, PasswordHasher, TokenIssuer
from .config import Settings, get_settings
from .db import UserStore
from .errors import CredentialServiceError
from .routes import health
from .schemas import AuthResult, ErrorResponse, LoginRequest, RegisterRequest, VerifyTokenRequest
from .service import CredentialService
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
}


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credential_service


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. The user store is connected on startup and
    closed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = UserStore(settings.DATABASE_URL, echo=settings.DB_ECHO)
        store.connect()
        app.state.user_store = store
        app.state.credential_service = CredentialService(
            store=store,
            hasher=PasswordHasher(rounds=BCRYPT_ROUNDS),
            tokens=TokenIssuer(
                settings.JWT_SECRET,
                algorithm=settings.JWT_ALGORITHM,
                expire_minutes=settings.JWT_EXPIRE_MINUTES,
            ),
        )
        logger.info("Credential Service started")
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title="Credential Service",
        description="User registration, login and JWT verification",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CredentialServiceError)
    async def credential_error_handler(_request: Request, exc: CredentialServiceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(health.router)

    @app.post("/auth/register", response_model=AuthResult, responses=_ERROR_RESPONSES)
    def register(payload: RegisterRequest, service: CredentialService = Depends(get_credential_service)):
        return service.register(payload)

    @app.post("/auth/login", response_model=AuthResult, responses=_ERROR_RESPONSES)
    def login(payload: LoginRequest, service: CredentialService = Depends(get_credential_service)):
        return service.login(payload)

    @app.post("/auth/verify", response_model=AuthResult, responses=_ERROR_RESPONSES)
    def verify_token(payload: VerifyTokenRequest, service: CredentialService = Depends(get_credential_service)):
        return service.verify_token(payload.token)

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
