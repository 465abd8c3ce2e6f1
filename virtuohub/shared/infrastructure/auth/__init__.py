from .gotrue import AuthError, GoTrueClient

__all__ = ["AuthError", "GoTrueClient"]
