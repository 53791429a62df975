"""Hook interfaces — abstract base classes for all swappable services.

These ABCs define the contracts between the classroom/assistant logic and
the infrastructure layer. Each one has a development implementation that
lets the service run end-to-end on one machine, and a production
implementation that the team wires in when ready.

Leaf module: imports only from abc, datetime (stdlib) and eduai.schemas
(also a leaf). No project services, no orchestration.

TEAM: To implement a real service, subclass the relevant ABC and implement
every abstract method. Python will raise TypeError at instantiation if
any method is missing — you'll know immediately what's left to do.

Usage:
    from eduai.hooks.interfaces import AuthService, Clock, StorePersistence
"""

from abc import ABC, abstractmethod
from datetime import datetime

from eduai.schemas import DataStore, User


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class AuthService(ABC):
    """Issues and validates opaque bearer tokens for signed-in users.

    EduAI Pro has no passwords: a teacher signs in with an e-mail address
    and a student joins with a name and a class code. The classroom layer
    decides who the user is; this service only remembers which token
    belongs to which User.

    TEAM: Replace the development implementation (InMemoryAuthService)
    with a real session backend if tokens must survive a restart.
    """

    @abstractmethod
    async def issue_token(self, user: User) -> str:
        """Creates a new token for an already-resolved user.

        Args:
            user: The identity to bind to the token.

        Returns:
            An opaque token string, unique per call.
        """
        ...

    @abstractmethod
    async def validate_token(self, token: str) -> User | None:
        """Returns the user bound to a token.

        Args:
            token: Token from the Authorization header.

        Returns:
            The User if the token is known, None otherwise.
        """
        ...

    @abstractmethod
    async def revoke_token(self, token: str) -> None:
        """Forgets a token (logout). Unknown tokens are a no-op.

        Args:
            token: The token to revoke.
        """
        ...


# ---------------------------------------------------------------------------
# Persistence (the whole DataStore, saved wholesale)
# ---------------------------------------------------------------------------


class StorePersistence(ABC):
    """Loads and saves the complete DataStore as one document.

    Both methods are synchronous: callers save right after each mutation
    and do not wait on anything else. There is no partial update — every
    save writes the whole tree, so a reader never sees half of one
    logical action.

    TEAM: Replace JsonFilePersistence with a database-backed implementation
    if the service ever runs on more than one machine.
    """

    @abstractmethod
    def load(self) -> DataStore | None:
        """Returns the last saved DataStore, or None if nothing was saved yet."""
        ...

    @abstractmethod
    def save(self, store: DataStore) -> None:
        """Persists the complete DataStore, replacing the previous snapshot.

        Args:
            store: The tree to persist.
        """
        ...


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class Clock(ABC):
    """Source of "now" for timestamps and relative-time formatting.

    Injected wherever a timestamp is produced so tests can pin time.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Returns the current time as a timezone-aware datetime."""
        ...
