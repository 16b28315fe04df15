"""Credential storage for connected sessions.

The server holds a single credential in memory. It lives behind the
``CredentialStore`` protocol, keyed by a session id, so handlers receive the
store by injection and tests can swap it out.

No locking is performed. Concurrent writers follow one rule: only successful
connects write, so the last successful write wins and a failure never
replaces a stored credential.
"""

import logging
from typing import Protocol

from .models import Credential

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class CredentialStore(Protocol):
    """Key-value store mapping a session id to its credential."""

    def get(self, session_id: str = DEFAULT_SESSION_ID) -> Credential | None:
        """Return the credential for the session, if any."""
        ...

    def set(self, credential: Credential, session_id: str = DEFAULT_SESSION_ID) -> None:
        """Store a credential, replacing any previous one."""
        ...

    def clear(self, session_id: str = DEFAULT_SESSION_ID) -> bool:
        """Remove the session's credential; return True if one was held."""
        ...

    def has(self, session_id: str = DEFAULT_SESSION_ID) -> bool:
        """Return True if the session holds a credential."""
        ...


class InMemoryCredentialStore:
    """Process-lifetime credential store. Restarting the server empties it."""

    def __init__(self) -> None:
        self._credentials: dict[str, Credential] = {}

    def get(self, session_id: str = DEFAULT_SESSION_ID) -> Credential | None:
        return self._credentials.get(session_id)

    def set(self, credential: Credential, session_id: str = DEFAULT_SESSION_ID) -> None:
        self._credentials[session_id] = credential
        logger.debug(f"Stored {credential.provider} credential for session '{session_id}'")

    def clear(self, session_id: str = DEFAULT_SESSION_ID) -> bool:
        removed = self._credentials.pop(session_id, None)
        return removed is not None

    def has(self, session_id: str = DEFAULT_SESSION_ID) -> bool:
        return session_id in self._credentials
