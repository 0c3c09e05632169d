"""Abstract store interfaces for identity management."""

from nexus_identity.repositories.ephemeral_store import EphemeralStore
from nexus_identity.repositories.session_store import (
    EphemeralSessionStore,
    SessionStore,
)

__all__ = [
    "EphemeralSessionStore",
    "EphemeralStore",
    "SessionStore",
]
