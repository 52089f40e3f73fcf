"""
Session Issuer

Mints credential pairs and opens session records. Shared by the signup,
signin and refresh use cases so all three issue tokens the same way.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID, uuid4

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import Session, TokenKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientMetadata:
    """Client details captured when a session is opened"""

    user_agent: Optional[str] = None
    ip: Optional[str] = None


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_expires_in: int


@dataclass(frozen=True)
class IssuedSession:
    session: Session
    tokens: TokenPair


class SessionIssuer:
    """
    Issues credential pairs bound to session records.

    Business Rules:
    - Session ids are random UUID4 values
    - Only the bcrypt hash of the refresh token is stored
    - Refresh expiry is absolute: now + refresh TTL, extended on rotation
    """

    def __init__(
        self,
        tokens: ITokenService,
        token_hasher: ISecretHasher,
        refresh_ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.tokens = tokens
        self.token_hasher = token_hasher
        self.refresh_ttl = refresh_ttl
        self.clock = clock

    def now(self) -> datetime:
        return self.clock()

    def mint_pair(self, user_id: UUID, session_id: UUID) -> TokenPair:
        return TokenPair(
            access_token=self.tokens.issue(TokenKind.access, user_id, session_id),
            refresh_token=self.tokens.issue(TokenKind.refresh, user_id, session_id),
            access_expires_in=self.tokens.access_expires_in,
        )

    async def hash_refresh_token(self, refresh_token: str) -> str:
        return await self.token_hasher.hash(refresh_token)

    async def refresh_token_matches(self, refresh_token: str, stored_hash: str) -> bool:
        return await self.token_hasher.verify(refresh_token, stored_hash)

    async def open_session(
        self, uow: UnitOfWork, user_id: UUID, metadata: ClientMetadata
    ) -> IssuedSession:
        """
        Create an ACTIVE session and its first credential pair.

        Must run inside the caller's unit of work; the caller commits.
        """
        session_id = uuid4()
        pair = self.mint_pair(user_id, session_id)
        refresh_hash = await self.hash_refresh_token(pair.refresh_token)

        session = Session(
            id=session_id,
            user_id=user_id,
            refresh_token_hash=refresh_hash,
            user_agent=metadata.user_agent,
            ip=metadata.ip,
            revoked=False,
            expires_at=self.now() + self.refresh_ttl,
        )
        session = await uow.sessions.create(session)
        logger.debug(f"Opened session {session_id} for user {user_id}")

        return IssuedSession(session=session, tokens=pair)
