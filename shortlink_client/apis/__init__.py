from .auth_api import AuthApi
from .url_api import UrlApi

__all__ = ["AuthApi", "UrlApi"]
