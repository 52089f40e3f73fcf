"""
Session Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of a session record"""

    active = "active"
    expired = "expired"
    revoked = "revoked"


class TokenKind(str, Enum):
    """Kind of signed credential; each kind has its own signing key"""

    access = "access"
    refresh = "refresh"
