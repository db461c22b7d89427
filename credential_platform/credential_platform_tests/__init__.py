"""
credential_service package

This package contains the core backend logic for the credential service.
It includes:

- FastAPI application (`main.py`)
- SQLAlchemy user model and user store (`models.py`, `db.py`)
- Password hashing and JWT logic (`auth.py`)
- Register, login and token verification (`service.py`)
- Pydantic schemas (`schemas.py`)

Used as the entry point for the credential microservice in the platform.
"""
