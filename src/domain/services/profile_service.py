"""Profile service layer with business logic."""

from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import (
    AccountNotFoundError,
    EducationNotFoundError,
    ExperienceNotFoundError,
    ProfileNotFoundError,
)
from domain.entities.profile import EducationEntry, ExperienceEntry, Profile, ProfileView
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.nested_collection import insert_front, remove_by_id
from domain.services.profile_normalizer import NormalizerConfig, build_profile_fields
from domain.services.store_guard import StorePolicy, run_guarded

logger = structlog.get_logger()


class ProfileService:
    """Service layer for Profile business logic.

    Profiles are always addressed through their owner, so every mutation
    acts on the caller's own profile.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        policy: StorePolicy = StorePolicy(),
        normalizer: NormalizerConfig = NormalizerConfig(),
    ) -> None:
        self._uow_factory = uow_factory
        self._policy = policy
        self._normalizer = normalizer

    async def get_for_owner(self, owner_id: UUID) -> ProfileView:
        """Get an account's profile with the owner's name and avatar."""

        async def operation() -> ProfileView:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get_by_owner(owner_id)
                if not profile:
                    raise ProfileNotFoundError(str(owner_id))
                owner = await uow.accounts.get(owner_id)
                return ProfileView(
                    profile=profile,
                    owner_name=owner.display_name if owner else None,
                    owner_avatar=owner.avatar_url if owner else None,
                )

        return await run_guarded(self._policy, operation, name="profile.get")

    async def list_all(self) -> list[ProfileView]:
        """Get every profile with its owner's name and avatar."""

        async def operation() -> list[ProfileView]:
            async with self._uow_factory() as uow:
                profiles = await uow.profiles.get_all()
                owners = await uow.accounts.get_many([p.owner_id for p in profiles])
                views = []
                for profile in profiles:
                    owner = owners.get(profile.owner_id)
                    views.append(
                        ProfileView(
                            profile=profile,
                            owner_name=owner.display_name if owner else None,
                            owner_avatar=owner.avatar_url if owner else None,
                        )
                    )
                return views

        return await run_guarded(self._policy, operation, name="profile.list")

    async def upsert(self, owner_id: UUID, payload: Mapping[str, Any]) -> Profile:
        """Create the caller's profile or overwrite the fields present in ``payload``.

        Experience and education entries are left untouched.
        """
        fields = build_profile_fields(payload, self._normalizer)

        async def operation() -> Profile:
            async with self._uow_factory() as uow:
                if not await uow.accounts.get(owner_id):
                    raise AccountNotFoundError(str(owner_id))
                profile = await uow.profiles.upsert_by_owner(owner_id, fields)
                await uow.commit()
                return profile

        profile = await run_guarded(self._policy, operation, name="profile.upsert")
        logger.info("profile_upserted", owner_id=str(owner_id), profile_id=str(profile.id))
        return profile

    async def add_experience(self, owner_id: UUID, entry: ExperienceEntry) -> Profile:
        """Put an experience entry at the front of the caller's profile."""

        def mutate(profile: Profile) -> None:
            profile.experience = insert_front(profile.experience, entry)

        return await self._mutate(owner_id, mutate, name="profile.add_experience")

    async def remove_experience(self, owner_id: UUID, entry_id: UUID) -> Profile:
        """Remove an experience entry from the caller's profile."""

        def mutate(profile: Profile) -> None:
            profile.experience = remove_by_id(
                profile.experience, entry_id, not_found=ExperienceNotFoundError
            )

        return await self._mutate(owner_id, mutate, name="profile.remove_experience")

    async def add_education(self, owner_id: UUID, entry: EducationEntry) -> Profile:
        """Put an education entry at the front of the caller's profile."""

        def mutate(profile: Profile) -> None:
            profile.education = insert_front(profile.education, entry)

        return await self._mutate(owner_id, mutate, name="profile.add_education")

    async def remove_education(self, owner_id: UUID, entry_id: UUID) -> Profile:
        """Remove an education entry from the caller's profile."""

        def mutate(profile: Profile) -> None:
            profile.education = remove_by_id(
                profile.education, entry_id, not_found=EducationNotFoundError
            )

        return await self._mutate(owner_id, mutate, name="profile.remove_education")

    # --- Helpers ---

    async def _mutate(
        self,
        owner_id: UUID,
        mutate: Callable[[Profile], None],
        name: str,
    ) -> Profile:
        """Load, mutate and save the owner's profile, retrying on a version race."""

        async def operation() -> Profile:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get_by_owner(owner_id)
                if not profile:
                    raise ProfileNotFoundError(str(owner_id))

                mutate(profile)
                profile.touch()

                updated = await uow.profiles.update(profile)
                await uow.commit()
                return updated

        return await run_guarded(self._policy, operation, name=name, retry_on_conflict=True)
