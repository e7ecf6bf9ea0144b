"""
Environment-aware configuration.
Values come from the environment (a .env file is read if present).
Integer settings fall back to their defaults when unset or unparsable.
"""
import os
from dotenv import load_dotenv

from services.settings import parse_bool, parse_int

load_dotenv()  # Read .env if present


def _env_int(name: str, default: int) -> int:
    return parse_int(os.getenv(name), default)


def _env_bool(name: str, default: bool) -> bool:
    return parse_bool(os.getenv(name), default)


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///hr-management.db")
    SQL_ECHO = _env_bool("SQL_ECHO", False)

    # JWT access tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me-to-a-32-byte-value")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "hr-project-management")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "hr-project-management-clients")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_MINUTES = _env_int("ACCESS_TOKEN_MINUTES", 60)

    # Opaque tokens
    REFRESH_TOKEN_DAYS = _env_int("REFRESH_TOKEN_DAYS", 7)
    PASSWORD_RESET_HOURS = _env_int("PASSWORD_RESET_HOURS", 1)
    # Return the reset token in the forgot-password response (development/testing only)
    EXPOSE_RESET_TOKEN = _env_bool("EXPOSE_RESET_TOKEN", False)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True
    EXPOSE_RESET_TOKEN = _env_bool("EXPOSE_RESET_TOKEN", True)


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///hr-management-test.db")
    JWT_SECRET = "test-secret-key-for-testing-only-do-not-use"
    EXPOSE_RESET_TOKEN = True
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False
    # Production requires explicit secrets; JwtSettings fails fast when these are empty
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ISSUER = os.getenv("JWT_ISSUER")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE")
    EXPOSE_RESET_TOKEN = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
