import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _setting(name: str, default):
    """env.yaml wins, then the process environment, then the default."""
    if name in data:
        return data[name]
    raw = os.environ.get(name)
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, list):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


class ApplicationConfig:
    DB_URI = _setting("DB_URI", "sqlite+aiosqlite:///./sessions.db")
    API_PORT = _setting("API_PORT", 8000)
    API_HOST = _setting("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _setting("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _setting("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _setting("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(_setting("ENABLE_LOGGING_MIDDLEWARE", True))
    JWT_ACCESS_SECRET = _setting("JWT_ACCESS_SECRET", "dev-access-secret-change-in-production")
    JWT_REFRESH_SECRET = _setting("JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production")
    ACCESS_TOKEN_EXPIRES_SECONDS = _setting("ACCESS_TOKEN_EXPIRES_SECONDS", 600)
    REFRESH_TOKEN_EXPIRES_DAYS = _setting("REFRESH_TOKEN_EXPIRES_DAYS", 30)
    TOKEN_HASH_ROUNDS = _setting("TOKEN_HASH_ROUNDS", 10)
    PASSWORD_HASH_ROUNDS = _setting("PASSWORD_HASH_ROUNDS", 10)
