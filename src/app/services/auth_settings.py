from datetime import timedelta

from pydantic import BaseModel, Field, model_validator


class AuthSettings(BaseModel):
    """
    Token and hashing settings.

    Built once at startup and passed to the codec and hashers; nothing
    reads secrets from module globals.
    """

    jwt_access_secret: str = Field(..., min_length=1)
    jwt_refresh_secret: str = Field(..., min_length=1)
    access_token_expires_seconds: int = Field(600, gt=0)
    refresh_token_expires_days: int = Field(30, gt=0)
    token_hash_rounds: int = Field(10, ge=4, le=31)
    password_hash_rounds: int = Field(10, ge=4, le=31)
    algorithm: str = "HS256"

    @model_validator(mode="after")
    def _distinct_secrets(self):
        # Access and refresh tokens must not verify under each other's key
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("JWT access and refresh secrets must differ")
        return self

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(seconds=self.access_token_expires_seconds)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_expires_days)

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            jwt_access_secret=config.JWT_ACCESS_SECRET,
            jwt_refresh_secret=config.JWT_REFRESH_SECRET,
            access_token_expires_seconds=config.ACCESS_TOKEN_EXPIRES_SECONDS,
            refresh_token_expires_days=config.REFRESH_TOKEN_EXPIRES_DAYS,
            token_hash_rounds=config.TOKEN_HASH_ROUNDS,
            password_hash_rounds=config.PASSWORD_HASH_ROUNDS,
        )
