"""
VirtuoHub Shared Kernel
=======================

UI-independent logic and infrastructure for the VirtuoHub client.

Architecture:
- core: EventBus, background tasks, configuration, service registry
- domain: deferred intents, auth state, login gate
- infrastructure: backend API and auth provider clients
"""

__version__ = "0.3.0"

__all__ = []
