from abc import ABC, abstractmethod

from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWorkError(Exception):
    """Raised when the backing store fails to apply a transaction"""


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sessions: ISessionRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        """Commit pending changes. Raises UnitOfWorkError on store failure."""
        pass

    @abstractmethod
    async def rollback(self):
        pass
