from .client import ApiError, TokenProvider, VirtuoHubApiClient

__all__ = ["ApiError", "TokenProvider", "VirtuoHubApiClient"]
