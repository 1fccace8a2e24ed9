import logging
import secrets

from src.config import Settings
from src.core.exceptions import AuthenticationError
from src.core.security import create_access_token
from src.schemas.auth import LoginRequest, Token

logger = logging.getLogger(__name__)


def authenticate_operator(data: LoginRequest, settings: Settings) -> Token:
    """The desk has a single operator account configured in settings."""
    username_ok = secrets.compare_digest(data.username.encode(), settings.admin_username.encode())
    password_ok = secrets.compare_digest(data.password.encode(), settings.admin_password.encode())
    if not (username_ok and password_ok):
        logger.warning("Rejected login for %r", data.username)
        raise AuthenticationError("Invalid username or password")

    return Token(access_token=create_access_token({"sub": data.username}))
