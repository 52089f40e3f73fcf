from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_issuer import ClientMetadata, SessionIssuer
from src.app.services.token_service import ITokenService
from src.app.use_cases.auth import AuthorizeUseCase, Principal

security = HTTPBearer(auto_error=False)


def create_session_factory(db_uri: str):
    engine = create_async_engine(db_uri, echo=False, future=True)
    session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    return engine, session_factory


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_service(request: Request) -> ITokenService:
    return request.app.state.token_service


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_password_hasher(request: Request) -> ISecretHasher:
    return request.app.state.password_hasher


def get_client_metadata(request: Request) -> ClientMetadata:
    user_agent = request.headers.get("user-agent")
    return ClientMetadata(
        user_agent=user_agent[:1024] if user_agent else None,
        ip=request.client.host if request.client else None,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow=Depends(get_unit_of_work),
    tokens: ITokenService = Depends(get_token_service),
) -> Principal:
    """
    Dependency to authorize the bearer access token of a request.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Principal with user_id and session_id

    Raises:
        ClientError: 401 if the token is missing, invalid or expired, or its
        session is revoked or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Unauthorized"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await AuthorizeUseCase(uow, tokens).execute(credentials.credentials)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    return result.value
