from sqlalchemy import Column, String
from .db import Base
import uuid


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    # bcrypt hash, never leaves the service
    password = Column(String, nullable=False)

    def to_dict(self) -> dict:
        """
        Outward representation of the user, with the password stripped.
        """
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
        }
