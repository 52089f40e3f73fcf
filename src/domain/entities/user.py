"""
User Entity

Represents an account that can sign in and own sessions.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class User(SQLModel, table=True):
    """
    User entity - the subject that sessions are issued for.

    Business Rules:
    - Identifier (e-mail or phone) must be unique across all users
    - Password stored as bcrypt hash
    - Immutable after signup
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    identifier: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
