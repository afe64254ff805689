"""Configuration management."""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class AuthConfig:
    """Shared-password login configuration."""

    # Which password was used decides the role
    login_password: str = os.getenv("LOGIN_PASSWORD", "yanya")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Session cookie
    session_cookie: str = os.getenv("SESSION_COOKIE", "sc_session")
    session_max_age: int = 60 * 60 * 24 * 7
    secure_cookie: bool = _env_flag("SECURE_COOKIE")


@dataclass
class ClientConfig:
    """Remote product store client configuration."""

    base_url: str = os.getenv("PRODUCT_BOARD_URL", "http://localhost:8000")
    timeout: int = int(os.getenv("PRODUCT_BOARD_TIMEOUT", "30"))


@dataclass
class ServerConfig:
    """API server configuration."""

    host: str = os.getenv("APP_HOST", "127.0.0.1")
    port: int = int(os.getenv("APP_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")


auth_config = AuthConfig()
client_config = ClientConfig()
server_config = ServerConfig()
