"""
JWT credential codec (HS256, python-jose).

Access and refresh tokens are signed with separate secrets and carry a
``typ`` claim, so a token of one kind never verifies as the other.
"""

from datetime import UTC, datetime
from typing import Callable
from uuid import UUID, uuid4

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError

from src.app.services.auth_settings import AuthSettings
from src.app.services.token_service import (
    InvalidSignatureError,
    ITokenService,
    MalformedTokenError,
    TokenClaims,
    TokenExpiredError,
)
from src.domain.base import utc_now
from src.domain.entities import TokenKind


def _epoch(moment: datetime) -> int:
    return int(moment.replace(tzinfo=UTC).timestamp())


class JwtTokenService(ITokenService):
    """Credential codec backed by python-jose"""

    def __init__(self, settings: AuthSettings, clock: Callable[[], datetime] = utc_now):
        self._algorithm = settings.algorithm
        self._access_expires_in = settings.access_token_expires_seconds
        self._keys = {
            TokenKind.access: settings.jwt_access_secret,
            TokenKind.refresh: settings.jwt_refresh_secret,
        }
        self._ttls = {
            TokenKind.access: settings.access_ttl,
            TokenKind.refresh: settings.refresh_ttl,
        }
        self._clock = clock

    @property
    def access_expires_in(self) -> int:
        return self._access_expires_in

    def issue(self, kind: TokenKind, user_id: UUID, session_id: UUID) -> str:
        """
        Issue a signed token.

        Args:
            kind: access or refresh
            user_id: Subject the token is issued for
            session_id: Session the token is bound to

        Returns:
            JWT string; the random ``jti`` makes every issuance unique
        """
        now = self._clock()
        payload = {
            "user_id": str(user_id),
            "session_id": str(session_id),
            "typ": kind.value,
            "jti": uuid4().hex,
            "iat": _epoch(now),
            "exp": _epoch(now + self._ttls[kind]),
        }
        return jwt.encode(payload, self._keys[kind], algorithm=self._algorithm)

    def verify(self, kind: TokenKind, token: str) -> TokenClaims:
        """
        Verify and decode a token of the given kind.

        Raises:
            MalformedTokenError: not a JWT, or claims missing / ill-typed
            InvalidSignatureError: wrong key or wrong kind
            TokenExpiredError: current time is at or past ``exp``
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedTokenError("Token is not a valid JWT") from exc

        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._keys[kind],
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as exc:
            raise MalformedTokenError(str(exc)) from exc
        except JWTError as exc:
            raise InvalidSignatureError("Token signature verification failed") from exc

        if payload.get("typ") != kind.value:
            raise InvalidSignatureError(f"Token is not a {kind.value} token")

        try:
            user_id = UUID(payload["user_id"])
            session_id = UUID(payload["session_id"])
            jti = payload["jti"]
            exp = payload["exp"]
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedTokenError("Token claims are incomplete") from exc

        if not isinstance(jti, str) or not jti:
            raise MalformedTokenError("Token nonce is missing")
        if isinstance(exp, bool) or not isinstance(exp, int):
            raise MalformedTokenError("Token expiry is not a timestamp")

        if _epoch(self._clock()) >= exp:
            raise TokenExpiredError("Token has expired")

        return TokenClaims(
            user_id=user_id,
            session_id=session_id,
            jti=jti,
            expires_at=datetime.fromtimestamp(exp, UTC).replace(tzinfo=None),
        )
