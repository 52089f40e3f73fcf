"""
Use Cases

Organized by domain folder:
- auth/: Signup, signin, token rotation, logout and request authorization
"""

from .auth import (
    AuthorizeUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    SigninUseCase,
    SignupUseCase,
)

__all__ = [
    "AuthorizeUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    "SigninUseCase",
    "SignupUseCase",
]
