"""Profile repository protocol."""

from typing import Any, Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile documents."""

    async def get_by_owner(self, owner_id: UUID) -> Profile | None:
        """Get the profile owned by an account."""
        ...

    async def get_all(self) -> list[Profile]:
        """Get every profile."""
        ...

    async def upsert_by_owner(self, owner_id: UUID, fields: dict[str, Any]) -> Profile:
        """Create the owner's profile or overwrite the given fields atomically.

        Sub-collections are never part of ``fields``.
        """
        ...

    async def update(self, profile: Profile) -> Profile:
        """Save the whole document; raises ConcurrentUpdateError on a stale version."""
        ...

    async def delete_by_owner(self, owner_id: UUID) -> bool:
        """Delete the owner's profile and return whether it existed."""
        ...
