"""
Refresh Token Use Case

Rotates the credential pair of a session, with refresh token reuse
detection.
"""

import logging
from datetime import datetime

from libs.result import Error, Result, Return
from src.app.services.session_issuer import SessionIssuer
from src.app.services.token_service import TokenError
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkError
from src.domain.entities import Session, SessionState, TokenKind
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)

# One error for every failure so callers cannot tell expired from reused
INVALID_TOKEN = Error("INVALID_TOKEN", "Invalid or expired refresh token")
STORE_UNAVAILABLE = Error("SESSION_STORE_UNAVAILABLE", "Session store unavailable")


class RefreshTokenUseCase:
    """
    Use case for rotating a session's credential pair.

    Business Rules:
    - Refresh token must verify against the refresh signing key
    - Session must exist, belong to the token's user and be ACTIVE
    - Presented token must match the stored hash (bcrypt, constant-time)
    - A valid token that does not match the stored hash has already been
      rotated out: the whole session is revoked
    - Rotation swaps the stored hash only if it is unchanged since it was
      read; losing that race also counts as reuse
    - If the commit fails, the new pair is discarded
    """

    def __init__(self, uow: UnitOfWork, issuer: SessionIssuer):
        self.uow = uow
        self.issuer = issuer

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with RefreshTokenResponse containing the new pair, or Error
        """
        try:
            claims = self.issuer.tokens.verify(TokenKind.refresh, refresh_token)
        except TokenError as exc:
            logger.info(f"Refresh rejected: {exc.__class__.__name__}")
            return Return.err(INVALID_TOKEN)

        async with self.uow:
            session = await self.uow.sessions.get_by_id(claims.session_id)

            if session is None or session.user_id != claims.user_id:
                logger.info(f"Refresh rejected: unknown session {claims.session_id}")
                return Return.err(INVALID_TOKEN)

            # Read once; the compare-and-swap below is keyed on this value
            stored_hash = session.refresh_token_hash
            now = self.issuer.now()

            state = session.state(now)
            if state != SessionState.active:
                logger.info(f"Refresh rejected: session {session.id} is {state.value}")
                return Return.err(INVALID_TOKEN)

            if not await self.issuer.refresh_token_matches(refresh_token, stored_hash):
                return await self._revoke_on_reuse(session, now)

            pair = self.issuer.mint_pair(session.user_id, session.id)
            new_hash = await self.issuer.hash_refresh_token(pair.refresh_token)

            rotated = await self.uow.sessions.rotate_refresh_hash(
                session.id,
                expected_hash=stored_hash,
                new_hash=new_hash,
                expires_at=now + self.issuer.refresh_ttl,
            )
            if not rotated:
                return await self._revoke_on_reuse(session, now)

            try:
                await self.uow.commit()
            except UnitOfWorkError:
                logger.error(f"Rotation of session {session.id} not committed")
                return Return.err(STORE_UNAVAILABLE)

            logger.info(f"Rotated credentials for session {session.id}")

            return Return.ok(
                RefreshTokenResponse(
                    access_token=pair.access_token,
                    refresh_token=pair.refresh_token,
                    access_expires_in=pair.access_expires_in,
                )
            )

    async def _revoke_on_reuse(
        self, session: Session, now: datetime
    ) -> Result[RefreshTokenResponse]:
        logger.warning(f"Refresh token reuse detected, revoking session {session.id}")
        await self.uow.sessions.revoke(session.id, now)
        try:
            await self.uow.commit()
        except UnitOfWorkError:
            logger.error(f"Revocation of session {session.id} not committed")
            return Return.err(STORE_UNAVAILABLE)
        return Return.err(INVALID_TOKEN)
