"""
Credential codec interface.

Issues and verifies signed, expiring access/refresh tokens carrying the
user id and session id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.entities import TokenKind


class TokenError(Exception):
    """Base class for credential verification failures"""


class MalformedTokenError(TokenError):
    """Token is not a structurally valid credential"""


class InvalidSignatureError(TokenError):
    """Token was not signed with the key for the expected kind"""


class TokenExpiredError(TokenError):
    """Token expiry instant has been reached"""


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    session_id: UUID
    jti: str
    expires_at: datetime


class ITokenService(ABC):
    """Credential codec - application layer"""

    @property
    @abstractmethod
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds"""
        pass

    @abstractmethod
    def issue(self, kind: TokenKind, user_id: UUID, session_id: UUID) -> str:
        """Issue a signed token; every call yields a distinct token"""
        pass

    @abstractmethod
    def verify(self, kind: TokenKind, token: str) -> TokenClaims:
        """Verify a token of the given kind. Raises TokenError subclasses."""
        pass
