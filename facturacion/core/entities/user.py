"""
Authenticated identity supplied by the bearer token.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity every invoice and client operation is scoped to."""

    id: int
    rol: str = "user"
    email: str | None = None
