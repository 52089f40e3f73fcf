from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import User


class IdentifierAlreadyExistsError(Exception):
    """Raised by create() when the identifier is already registered"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Identifier already registered: {identifier}")


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Get user by login identifier"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises IdentifierAlreadyExistsError on duplicates."""
        pass
