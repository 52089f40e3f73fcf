from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.adapter.services.bcrypt_hasher import BcryptHasher
from src.adapter.services.jwt_token_service import JwtTokenService
from src.app.services.auth_settings import AuthSettings
from src.app.services.session_issuer import ClientMetadata, SessionIssuer
from tests.fixtures.clock import FakeClock
from tests.fixtures.memory_uow import InMemoryUnitOfWork, MemoryStore


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def settings():
    return AuthSettings(
        jwt_access_secret="unit-access-secret",
        jwt_refresh_secret="unit-refresh-secret",
        access_token_expires_seconds=600,
        refresh_token_expires_days=30,
        token_hash_rounds=4,
        password_hash_rounds=4,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_service(settings, clock):
    return JwtTokenService(settings, clock=clock)


@pytest.fixture
def token_hasher(settings):
    return BcryptHasher(settings.token_hash_rounds)


@pytest.fixture
def password_hasher(settings):
    return BcryptHasher(settings.password_hash_rounds)


@pytest.fixture
def issuer(token_service, token_hasher, settings, clock):
    return SessionIssuer(
        tokens=token_service,
        token_hasher=token_hasher,
        refresh_ttl=settings.refresh_ttl,
        clock=clock,
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def memory_uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def open_session(memory_uow_factory, issuer):
    """Open and commit a session in the memory store; returns IssuedSession"""

    async def _open(user_id=None):
        uow = memory_uow_factory()
        async with uow:
            issued = await issuer.open_session(uow, user_id or uuid4(), ClientMetadata())
            await uow.commit()
        return issued

    return _open
