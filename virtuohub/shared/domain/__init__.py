"""
Shared Domain Module
====================

Business logic independent of the UI toolkit.

- intents: deferred-intent store, replay handler registry
- auth: session state, login gate, replay-on-sign-in observer
"""
