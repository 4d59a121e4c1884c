from .http import AuthenticatedClient, BackendAPIError, clean_params
from .logger import get_logger, redact_secrets, setup_logging, setup_logging_from_settings

__all__ = [
    "AuthenticatedClient",
    "BackendAPIError",
    "clean_params",
    "get_logger",
    "redact_secrets",
    "setup_logging",
    "setup_logging_from_settings",
]
