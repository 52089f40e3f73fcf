from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        # Rotation and revocation are bulk UPDATEs; reload rather than trust
        # whatever this session already holds in its identity map
        stmt = (
            select(Session)
            .where(Session.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def rotate_refresh_hash(
        self,
        session_id: UUID,
        expected_hash: str,
        new_hash: str,
        expires_at: datetime,
    ) -> bool:
        """
        Compare-and-swap on the stored hash.

        The WHERE clause carries the previously read hash, so of two
        concurrent rotations of the same session only the first matches a
        row; the database serializes the writes.
        """
        if not expected_hash:
            return False

        stmt = (
            update(Session)
            .where(
                Session.id == session_id,
                Session.refresh_token_hash == expected_hash,
                Session.revoked == False,  # noqa: E712
            )
            .values(refresh_token_hash=new_hash, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def revoke(self, session_id: UUID, revoked_at: datetime) -> bool:
        """Revoke a session and clear its refresh hash (idempotent)"""
        stmt = (
            update(Session)
            .where(Session.id == session_id)
            .values(
                revoked=True,
                refresh_token_hash="",
                revoked_at=func.coalesce(Session.revoked_at, revoked_at),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
