"""In-memory token registry — development implementation of AuthService.

Tokens are random URL-safe strings mapped to User objects in a dict.
Everything is lost on restart, which only means users sign in again.

TEAM: Replace this with a persistent session backend if needed. Subclass
AuthService from eduai.hooks.interfaces and implement issue_token,
validate_token and revoke_token.

Service module: imports from eduai.hooks.interfaces and eduai.schemas.

Usage:
    from eduai.hooks.auth import InMemoryAuthService

    auth = InMemoryAuthService()
    token = await auth.issue_token(user)
    await auth.validate_token(token)  # -> user
"""

import secrets

from eduai.hooks.interfaces import AuthService
from eduai.schemas import User


class InMemoryAuthService(AuthService):
    """Dict-backed token registry, loses tokens on restart."""

    def __init__(self) -> None:
        """Initialises an empty token registry."""
        self._tokens: dict[str, User] = {}

    async def issue_token(self, user: User) -> str:
        """Stores the user under a fresh random token.

        Args:
            user: The identity to bind.

        Returns:
            A 32-byte URL-safe token.
        """
        token = secrets.token_urlsafe(32)
        self._tokens[token] = user
        return token

    async def validate_token(self, token: str) -> User | None:
        """Looks a token up. Empty or unknown tokens return None."""
        if not token:
            return None
        return self._tokens.get(token)

    async def revoke_token(self, token: str) -> None:
        """Forgets a token. No-op if not found (idempotent)."""
        self._tokens.pop(token, None)
