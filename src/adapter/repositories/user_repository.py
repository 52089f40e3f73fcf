from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import (
    IdentifierAlreadyExistsError,
    IUserRepository,
)
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Get user by login identifier"""
        stmt = select(User).where(User.identifier == identifier)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Unique index on identifier lost a race with a concurrent signup
            await self.session.rollback()
            raise IdentifierAlreadyExistsError(user.identifier) from exc
        await self.session.refresh(user)
        return user
