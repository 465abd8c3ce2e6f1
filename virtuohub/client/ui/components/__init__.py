from .auth_modal import AuthModal

__all__ = ["AuthModal"]
