import logging

from libs.result import Error, Result, Return

from src.app.repositories.user_repository import IdentifierAlreadyExistsError
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_issuer import ClientMetadata, SessionIssuer
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkError
from src.domain.entities import User
from .dtos import AuthTokensResponse, SignupCommand

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[AuthTokensResponse]

    Business Logic:
    1. Reject identifiers that are already registered
    2. Hash password with bcrypt
    3. Create User
    4. Open a session and issue the first credential pair
    5. Commit user and session atomically
    """

    def __init__(
        self, uow: UnitOfWork, issuer: SessionIssuer, password_hasher: ISecretHasher
    ):
        self.uow = uow
        self.issuer = issuer
        self.password_hasher = password_hasher

    async def execute(
        self, command: SignupCommand, metadata: ClientMetadata = ClientMetadata()
    ) -> Result[AuthTokensResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with validated identifier and password
            metadata: User agent and address of the client

        Returns:
            Result[AuthTokensResponse] with user id and tokens,
            or Error(IDENTIFIER_ALREADY_EXISTS) if the identifier is taken
        """
        async with self.uow:
            existing_user = await self.uow.users.get_by_identifier(command.identifier)
            if existing_user:
                return Return.err(
                    Error("IDENTIFIER_ALREADY_EXISTS", "User already exists")
                )

            password_hash = await self.password_hasher.hash(command.password)

            try:
                user = await self.uow.users.create(
                    User(identifier=command.identifier, password_hash=password_hash)
                )
            except IdentifierAlreadyExistsError:
                return Return.err(
                    Error("IDENTIFIER_ALREADY_EXISTS", "User already exists")
                )

            issued = await self.issuer.open_session(self.uow, user.id, metadata)

            try:
                await self.uow.commit()
            except UnitOfWorkError:
                return Return.err(
                    Error("SESSION_STORE_UNAVAILABLE", "Session store unavailable")
                )

            logger.info(f"User {user.id} signed up, session {issued.session.id}")

            return Return.ok(
                AuthTokensResponse(
                    user_id=str(user.id),
                    access_token=issued.tokens.access_token,
                    refresh_token=issued.tokens.refresh_token,
                    access_expires_in=issued.tokens.access_expires_in,
                )
            )
