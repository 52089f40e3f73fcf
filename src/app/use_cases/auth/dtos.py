"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
Field names serialize as camelCase for the HTTP API.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Commands
# ============================================================================


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    identifier: str
    password: str


class SigninCommand(BaseModel):
    """Signin command - identifier/password pair to authenticate"""

    identifier: str
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthTokensResponse(CamelModel):
    """Response for signup and signin use cases"""

    user_id: str
    access_token: str
    refresh_token: str
    access_expires_in: int


class RefreshTokenResponse(CamelModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    access_expires_in: int


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    message: str


class Principal(BaseModel):
    """Identity attached to a request that passed the access guard"""

    user_id: str
    session_id: str
