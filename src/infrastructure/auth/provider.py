"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Represents the caller identity extracted from an auth token."""

    id: UUID
    email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    def validate_token(self, token: str) -> TokenUser:
        """
        Verify a bearer token offline and extract the caller identity.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser for the account the token was issued to

        Raises:
            AuthenticationError: If the token is malformed, forged or expired
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...
