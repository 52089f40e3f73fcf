"""
Bcrypt hasher for refresh tokens and passwords.

Input is SHA-256 pre-hashed before bcrypt: bcrypt only reads the first
72 bytes, and JWTs for the same session share a far longer prefix.
"""

import asyncio
import hashlib

import bcrypt

from src.app.services.secret_hasher import ISecretHasher


def _prehash(secret: str) -> bytes:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest().encode("ascii")


class BcryptHasher(ISecretHasher):
    """Salted bcrypt with a tunable cost factor, run off the event loop"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_digest = bcrypt.hashpw(b"dummy_secret", bcrypt.gensalt(rounds)).decode()

    async def hash(self, secret: str) -> str:
        return await asyncio.to_thread(self._hash, secret)

    async def verify(self, secret: str, digest: str) -> bool:
        # Empty digest means "no valid secret"; it never matches
        if not secret or not digest:
            return False
        return await asyncio.to_thread(self._verify, secret, digest)

    async def verify_dummy(self, secret: str) -> bool:
        """Spend the same work as verify() against a throwaway digest."""
        await asyncio.to_thread(self._verify, secret or "dummy", self._dummy_digest)
        return False

    def _hash(self, secret: str) -> str:
        return bcrypt.hashpw(_prehash(secret), bcrypt.gensalt(self.rounds)).decode("ascii")

    def _verify(self, secret: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_prehash(secret), digest.encode("ascii"))
        except (ValueError, UnicodeEncodeError):
            # Unparsable stored digest
            return False
