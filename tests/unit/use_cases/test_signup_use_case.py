from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest

from src.app.repositories.user_repository import IdentifierAlreadyExistsError
from src.app.services.session_issuer import ClientMetadata
from src.app.services.unit_of_work import UnitOfWorkError
from src.app.use_cases.auth.dtos import SignupCommand
from src.app.use_cases.auth.signup_use_case import SignupUseCase
from src.domain.entities import Session, TokenKind, User


@pytest.fixture
def mock_uow(mock_uow):
    """Mock UnitOfWork with user and session repositories"""
    mock_uow.users = MagicMock()
    mock_uow.users.get_by_identifier = AsyncMock(return_value=None)
    mock_uow.users.create = AsyncMock(side_effect=lambda user: user)

    mock_uow.sessions = MagicMock()
    mock_uow.sessions.create = AsyncMock(side_effect=lambda session: session)

    return mock_uow


@pytest.mark.asyncio
async def test_successful_signup(mock_uow, issuer, password_hasher, token_service, token_hasher, clock):
    """Signup creates the user, opens a session and returns a token pair"""
    # Arrange
    use_case = SignupUseCase(mock_uow, issuer, password_hasher)
    command = SignupCommand(identifier="a@x.com", password="secret1")
    metadata = ClientMetadata(user_agent="pytest", ip="127.0.0.1")

    # Act
    result = await use_case.execute(command, metadata)

    # Assert
    assert result.is_ok()
    data = result.value
    assert data.access_token
    assert data.refresh_token
    assert data.access_expires_in == 600

    created_user: User = mock_uow.users.create.call_args.args[0]
    assert created_user.identifier == "a@x.com"
    assert created_user.password_hash != "secret1"
    assert await password_hasher.verify("secret1", created_user.password_hash)

    created_session: Session = mock_uow.sessions.create.call_args.args[0]
    assert created_session.user_id == created_user.id
    assert created_session.revoked is False
    assert created_session.user_agent == "pytest"
    assert created_session.ip == "127.0.0.1"
    assert created_session.expires_at == clock.now + issuer.refresh_ttl
    assert await token_hasher.verify(data.refresh_token, created_session.refresh_token_hash)

    claims = token_service.verify(TokenKind.access, data.access_token)
    assert claims.user_id == created_user.id
    assert claims.session_id == created_session.id
    assert data.user_id == str(created_user.id)

    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_signup_identifier_already_exists(mock_uow, issuer, password_hasher):
    """Signup with a registered identifier fails without creating anything"""
    mock_uow.users.get_by_identifier.return_value = User(
        id=uuid4(), identifier="a@x.com", password_hash="x"
    )

    use_case = SignupUseCase(mock_uow, issuer, password_hasher)
    result = await use_case.execute(SignupCommand(identifier="a@x.com", password="secret1"))

    assert result.is_err()
    assert result.error.code == "IDENTIFIER_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_called()
    mock_uow.sessions.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_signup_loses_race_on_unique_identifier(mock_uow, issuer, password_hasher):
    """A concurrent signup that wins the unique index surfaces as a conflict"""
    mock_uow.users.create.side_effect = IdentifierAlreadyExistsError("a@x.com")

    use_case = SignupUseCase(mock_uow, issuer, password_hasher)
    result = await use_case.execute(SignupCommand(identifier="a@x.com", password="secret1"))

    assert result.is_err()
    assert result.error.code == "IDENTIFIER_ALREADY_EXISTS"
    mock_uow.sessions.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_signup_commit_failure(mock_uow, issuer, password_hasher):
    """Tokens are not returned when the transaction cannot be committed"""
    mock_uow.commit.side_effect = UnitOfWorkError("down")

    use_case = SignupUseCase(mock_uow, issuer, password_hasher)
    result = await use_case.execute(SignupCommand(identifier="a@x.com", password="secret1"))

    assert result.is_err()
    assert result.error.code == "SESSION_STORE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_signup_session_ids_are_unique(mock_uow, issuer, password_hasher):
    use_case = SignupUseCase(mock_uow, issuer, password_hasher)

    await use_case.execute(SignupCommand(identifier="a@x.com", password="secret1"))
    await use_case.execute(SignupCommand(identifier="b@x.com", password="secret1"))

    first, second = [call.args[0] for call in mock_uow.sessions.create.call_args_list]
    assert isinstance(first.id, UUID)
    assert first.id != second.id
