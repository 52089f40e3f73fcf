import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkError
from src.domain.base import utc_now
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for ending a session.

    Business Rules:
    - Revocation is terminal and clears the refresh token hash
    - Logging out an already revoked session succeeds
    - Unknown session ids fail with SESSION_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(self, session_id: UUID) -> Result[LogoutResponse]:
        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            await self.uow.sessions.revoke(session_id, self.clock())

            try:
                await self.uow.commit()
            except UnitOfWorkError:
                return Return.err(
                    Error("SESSION_STORE_UNAVAILABLE", "Session store unavailable")
                )

            logger.info(f"Session {session_id} revoked by logout")
            return Return.ok(LogoutResponse(message="Logged out"))
