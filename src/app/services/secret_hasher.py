from abc import ABC, abstractmethod


class ISecretHasher(ABC):
    """One-way salted hashing for refresh tokens and passwords"""

    @abstractmethod
    async def hash(self, secret: str) -> str:
        """Hash a secret; identical input yields different digests"""
        pass

    @abstractmethod
    async def verify(self, secret: str, digest: str) -> bool:
        """Constant-time check that secret hashes to digest"""
        pass

    @abstractmethod
    async def verify_dummy(self, secret: str) -> bool:
        """Burn verify() work without a real digest; always False"""
        pass
