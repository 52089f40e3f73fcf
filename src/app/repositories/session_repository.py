from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def rotate_refresh_hash(
        self,
        session_id: UUID,
        expected_hash: str,
        new_hash: str,
        expires_at: datetime,
    ) -> bool:
        """
        Replace the refresh token hash only if it still equals expected_hash
        and the session is not revoked. Returns True if the row was updated.
        """
        pass

    @abstractmethod
    async def revoke(self, session_id: UUID, revoked_at: datetime) -> bool:
        """
        Mark a session revoked and clear its refresh token hash.
        Returns True if the session exists (already revoked included).
        """
        pass
