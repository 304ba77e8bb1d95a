"""Ownership checks for user-owned resources."""

from uuid import UUID

from core.exceptions import AuthorizationError


def ensure_owner(caller_id: UUID, owner_id: UUID, resource: str = "resource") -> None:
    """Allow the caller only if it owns the resource.

    Call after the resource has been loaded so that a missing resource is
    reported as not found rather than forbidden.

    Raises:
        AuthorizationError: If the caller is not the owner
    """
    if caller_id != owner_id:
        raise AuthorizationError(f"User not authorized to modify this {resource}")
