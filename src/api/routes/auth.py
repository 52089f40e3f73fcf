from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_issuer import ClientMetadata, SessionIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthTokensResponse,
    LogoutResponse,
    LogoutUseCase,
    Principal,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    SigninCommand,
    SigninUseCase,
    SignupCommand,
    SignupUseCase,
)
from src.app.use_cases.auth.dtos import CamelModel
from src.depends import (
    get_client_metadata,
    get_current_user,
    get_password_hasher,
    get_session_issuer,
    get_unit_of_work,
)

router = APIRouter(tags=["Authentication"])


def _raise_for(error, client_errors: dict):
    if error.code in client_errors:
        raise ClientError(error, status_code=client_errors[error.code])
    if error.code == "SESSION_STORE_UNAVAILABLE":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    """

    identifier: str = Field(
        ..., min_length=3, max_length=255, description="E-mail or phone number"
    )
    password: str = Field(..., min_length=6, description="User password (min 6 chars)")


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=AuthTokensResponse
)
async def signup(
    request: SignupRequest,
    metadata: ClientMetadata = Depends(get_client_metadata),
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
    password_hasher: ISecretHasher = Depends(get_password_hasher),
):
    """
    User Signup

    Creates an account and its first session.
    Returns an access token and a refresh token.

    Raises:
        - 409 Conflict: Identifier already registered
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 503 Service Unavailable: Session store failure
    """
    command = SignupCommand(identifier=request.identifier, password=request.password)

    use_case = SignupUseCase(uow, issuer, password_hasher)
    result = await use_case.execute(command, metadata)

    if result.is_err():
        _raise_for(
            result.error, {"IDENTIFIER_ALREADY_EXISTS": status.HTTP_409_CONFLICT}
        )

    return result.value


class SigninRequest(BaseModel):
    """
    Signin HTTP request payload

    Only presence is checked; a password that could never have been
    registered still ends in INVALID_CREDENTIALS.
    """

    identifier: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


@router.post("/signin", status_code=status.HTTP_200_OK, response_model=AuthTokensResponse)
async def signin(
    request: SigninRequest,
    metadata: ClientMetadata = Depends(get_client_metadata),
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
    password_hasher: ISecretHasher = Depends(get_password_hasher),
):
    """
    User Signin

    Authenticates the user and opens a new session.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 503 Service Unavailable: Session store failure
    """
    command = SigninCommand(identifier=request.identifier, password=request.password)

    use_case = SigninUseCase(uow, issuer, password_hasher)
    result = await use_case.execute(command, metadata)

    if result.is_err():
        _raise_for(result.error, {"INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED})

    return result.value


class RefreshRequest(CamelModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post(
    "/signin/new_token",
    status_code=status.HTTP_200_OK,
    response_model=RefreshTokenResponse,
)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Rotate Token Pair

    Exchanges a refresh token for a new access/refresh pair. The presented
    refresh token stops working. Presenting a refresh token that was
    already rotated out revokes the whole session.

    Raises:
        - 401 Unauthorized: Any refresh failure (reason is not disclosed)
        - 503 Service Unavailable: Session store failure
    """
    use_case = RefreshTokenUseCase(uow, issuer)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        _raise_for(result.error, {"INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED})

    return result.value


@router.get("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    current_user: Principal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Revokes the session of the bearer access token. Every token issued
    for that session stops working immediately.

    Raises:
        - 400 Bad Request: Session not found
        - 401 Unauthorized: Missing or invalid access token
    """
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(UUID(current_user.session_id))

    if result.is_err():
        _raise_for(result.error, {"SESSION_NOT_FOUND": status.HTTP_400_BAD_REQUEST})

    return result.value
