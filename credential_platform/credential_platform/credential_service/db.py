"""
Database connection and user persistence for the Credential Service
"""
from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

_IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class UserStore:
    """
    SQLAlchemy-backed store of user records, keyed by email.

    The engine is created by ``connect()`` and released by ``close()``;
    the store is unusable outside that window.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("User store is not connected")
        return self._engine

    def connect(self) -> None:
        """Create the engine and the users table if it does not exist."""
        from .models import User  # noqa: F401  registers the table on Base

        kwargs = {"echo": self.echo}
        if self.database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        if self.database_url in _IN_MEMORY_URLS:
            # every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool

        self._engine = create_engine(self.database_url, **kwargs)
        self._session_factory = sessionmaker(
            bind=self._engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        try:
            Base.metadata.create_all(bind=self._engine)
        except Exception as e:
            logger.error(f"Failed to initialize user store: {e}")
            self.close()
            raise
        logger.info("User store connected: %s", self._engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("User store disconnected")
        self._engine = None
        self._session_factory = None

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise RuntimeError("User store is not connected")
        db = self._session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def find_by_email(self, email: str):
        from .models import User

        with self.session() as db:
            return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def create_user(self, email: str, name: str, password_hash: str):
        """
        Persist a new user.

        Raises:
            sqlalchemy.exc.IntegrityError: if the email is already taken
        """
        from .models import User

        with self.session() as db:
            user = User(email=email, name=name, password=password_hash)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    def count_by_email(self, email: str) -> int:
        from .models import User

        with self.session() as db:
            return db.execute(
                select(func.count()).select_from(User).where(User.email == email)
            ).scalar_one()

    def check_connection(self) -> bool:
        """
        Check if the database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection check failed: {e}")
            return False
