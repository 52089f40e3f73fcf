"""
Session Entity

Server-side record binding a session id to its user and the hash of the
one refresh token currently allowed to rotate it.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now
from .enums import SessionState


class Session(SQLModel, table=True):
    """
    Session entity - stores the current refresh token hash.

    Business Rules:
    - Refresh tokens are hashed (bcrypt), never stored in plaintext
    - Tokens rotate on each refresh; only the latest hash is valid
    - An empty hash means no refresh token is valid
    - Revocation is terminal
    - Rows are never deleted
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    refresh_token_hash: str = Field(default="", max_length=60)  # Bcrypt output
    user_agent: Optional[str] = Field(default=None, max_length=1024)
    ip: Optional[str] = Field(default=None, max_length=45)

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_revoked", "revoked"),
    )

    def state(self, now: datetime) -> SessionState:
        if self.revoked:
            return SessionState.revoked
        if now > self.expires_at:
            return SessionState.expired
        return SessionState.active

    def is_active(self, now: datetime) -> bool:
        return self.state(now) == SessionState.active
