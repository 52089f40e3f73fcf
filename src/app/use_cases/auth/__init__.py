"""
Authentication Use Cases

Session lifecycle: signup/signin open sessions, refresh rotates them,
logout revokes them, authorize guards privileged requests.
"""

from .signup_use_case import SignupUseCase
from .signin_use_case import SigninUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .authorize_use_case import AuthorizeUseCase
from .dtos import (
    AuthTokensResponse,
    LogoutResponse,
    Principal,
    RefreshTokenResponse,
    SigninCommand,
    SignupCommand,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "SigninUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "AuthorizeUseCase",
    # DTOs - Commands
    "SignupCommand",
    "SigninCommand",
    # DTOs - Responses
    "AuthTokensResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "Principal",
]
