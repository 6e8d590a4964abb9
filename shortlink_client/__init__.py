from .config import AppSettings, ConfigurationError
from .errors import ApiError, ShortlinkError, TokenRefreshError, error_message
from .http import AuthenticatedHttpClient
from .models import AuthState, Credentials, ShortUrl, TokenPair
from .services import ShortlinkService, build_service
from .token_store import InMemoryTokenStore, PersistedTokenStore, TokenStore, build_session_terminator

__all__ = [
    "ApiError",
    "AppSettings",
    "AuthState",
    "AuthenticatedHttpClient",
    "ConfigurationError",
    "Credentials",
    "InMemoryTokenStore",
    "PersistedTokenStore",
    "ShortUrl",
    "ShortlinkError",
    "ShortlinkService",
    "TokenPair",
    "TokenRefreshError",
    "TokenStore",
    "build_service",
    "build_session_terminator",
    "error_message",
]
