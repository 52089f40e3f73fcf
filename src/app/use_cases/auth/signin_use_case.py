"""
Signin Use Case

Authenticates an identifier/password pair and opens a new session.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_issuer import ClientMetadata, SessionIssuer
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkError
from .dtos import AuthTokensResponse, SigninCommand

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")


class SigninUseCase:
    """
    Use case for signin and credential issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown identifier and wrong password are indistinguishable
    - Each signin opens a new session (one per device)
    - No session is created on failure
    """

    def __init__(
        self, uow: UnitOfWork, issuer: SessionIssuer, password_hasher: ISecretHasher
    ):
        self.uow = uow
        self.issuer = issuer
        self.password_hasher = password_hasher

    async def execute(
        self, command: SigninCommand, metadata: ClientMetadata = ClientMetadata()
    ) -> Result[AuthTokensResponse]:
        """
        Execute signin use case.

        Args:
            command: Identifier and plain text password
            metadata: User agent and address of the client

        Returns:
            Result with AuthTokensResponse, or Error(INVALID_CREDENTIALS)
        """
        async with self.uow:
            user = await self.uow.users.get_by_identifier(command.identifier)

            if user is None:
                # Hash anyway so response time does not reveal unknown users
                await self.password_hasher.verify_dummy(command.password)
                return Return.err(INVALID_CREDENTIALS)

            password_valid = await self.password_hasher.verify(
                command.password, user.password_hash
            )
            if not password_valid:
                logger.info(f"Signin rejected for user {user.id}: wrong password")
                return Return.err(INVALID_CREDENTIALS)

            issued = await self.issuer.open_session(self.uow, user.id, metadata)

            try:
                await self.uow.commit()
            except UnitOfWorkError:
                return Return.err(
                    Error("SESSION_STORE_UNAVAILABLE", "Session store unavailable")
                )

            logger.info(f"User {user.id} signed in, session {issued.session.id}")

            return Return.ok(
                AuthTokensResponse(
                    user_id=str(user.id),
                    access_token=issued.tokens.access_token,
                    refresh_token=issued.tokens.refresh_token,
                    access_expires_in=issued.tokens.access_expires_in,
                )
            )
