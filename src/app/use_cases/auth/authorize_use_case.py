"""
Authorize Use Case

Access guard run on every privileged request.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.token_service import ITokenService, TokenError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import TokenKind
from .dtos import Principal

logger = logging.getLogger(__name__)

UNAUTHORIZED = Error("UNAUTHORIZED", "Unauthorized")


class AuthorizeUseCase:
    """
    Verifies an access token and checks its session is still live.

    Business Rules:
    - Token must verify against the access signing key and not be expired
    - Session must exist, belong to the token's user, and be ACTIVE
    - Revoking a session rejects its access tokens before they expire
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: ITokenService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.tokens = tokens
        self.clock = clock

    async def execute(self, access_token: str) -> Result[Principal]:
        try:
            claims = self.tokens.verify(TokenKind.access, access_token)
        except TokenError as exc:
            logger.debug(f"Access token rejected: {exc.__class__.__name__}")
            return Return.err(UNAUTHORIZED)

        # Leaving the unit of work rolls back and expires the loaded record
        async with self.uow:
            session = await self.uow.sessions.get_by_id(claims.session_id)

            if session is None or session.user_id != claims.user_id:
                return Return.err(UNAUTHORIZED)

            if not session.is_active(self.clock()):
                logger.debug(f"Access rejected: session {claims.session_id} not active")
                return Return.err(UNAUTHORIZED)

            return Return.ok(
                Principal(user_id=str(claims.user_id), session_id=str(claims.session_id))
            )
