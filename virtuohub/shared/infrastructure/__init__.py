"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (backend API, hosted auth provider).
"""

# Backend API
from virtuohub.shared.infrastructure.api import ApiError, VirtuoHubApiClient

# Auth provider
from virtuohub.shared.infrastructure.auth import AuthError, GoTrueClient

__all__ = [
    "ApiError",
    "VirtuoHubApiClient",
    "AuthError",
    "GoTrueClient",
]
