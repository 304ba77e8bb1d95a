"""Unit tests for ProfileService."""

from datetime import date
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AccountNotFoundError,
    EducationNotFoundError,
    ExperienceNotFoundError,
    ProfileNotFoundError,
    ValidationError,
)
from domain.entities.account import Account
from domain.entities.profile import EducationEntry, ExperienceEntry, Profile
from domain.services.profile_normalizer import NormalizerConfig
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


@pytest.fixture
def profile(user_id: UUID) -> Profile:
    return Profile(owner_id=user_id, status="Developer", skills=["go"])


def _experience(title: str = "Engineer") -> ExperienceEntry:
    return ExperienceEntry(title=title, company="Acme", from_date=date(2020, 1, 1))


# --- upsert ---


class TestUpsert:
    async def test_normalizes_before_saving(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        account: Account,
        profile: Profile,
    ):
        uow.accounts.get.return_value = account
        uow.profiles.upsert_by_owner.return_value = profile

        result = await service.upsert(
            account.id,
            {"status": "Developer", "skills": "go, rust", "website": "example.com"},
        )

        assert result is profile
        owner_id, fields = uow.profiles.upsert_by_owner.call_args.args
        assert owner_id == account.id
        assert fields["skills"] == ["go", "rust"]
        assert fields["website"] == "https://example.com"
        assert fields["social"].twitter == ""
        assert "company" not in fields
        assert uow.committed

    async def test_legacy_skills_mode(
        self, uow: FakeUnitOfWork, account: Account, profile: Profile
    ):
        service = ProfileService(
            lambda: uow, normalizer=NormalizerConfig(skills_leading_space=True)
        )
        uow.accounts.get.return_value = account
        uow.profiles.upsert_by_owner.return_value = profile

        await service.upsert(account.id, {"status": "Dev", "skills": "go,rust"})

        _, fields = uow.profiles.upsert_by_owner.call_args.args
        assert fields["skills"] == [" go", " rust"]

    async def test_missing_status_is_rejected_before_store(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        with pytest.raises(ValidationError):
            await service.upsert(user_id, {"skills": "go"})

        uow.accounts.get.assert_not_called()

    async def test_missing_account_raises(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.accounts.get.return_value = None

        with pytest.raises(AccountNotFoundError):
            await service.upsert(user_id, {"status": "Dev", "skills": ["go"]})

        uow.profiles.upsert_by_owner.assert_not_called()


# --- reads ---


class TestReads:
    async def test_get_for_owner_includes_owner_identity(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        account: Account,
        profile: Profile,
    ):
        uow.profiles.get_by_owner.return_value = profile
        uow.accounts.get.return_value = account

        view = await service.get_for_owner(account.id)

        assert view.profile is profile
        assert view.owner_name == "Dev"
        assert view.owner_avatar == account.avatar_url

    async def test_get_for_owner_missing_raises(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_owner.return_value = None

        with pytest.raises(ProfileNotFoundError) as exc_info:
            await service.get_for_owner(user_id)

        assert exc_info.value.message == "There is no profile for this user"

    async def test_list_all_tolerates_missing_owner(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        account: Account,
        profile: Profile,
    ):
        orphan = Profile(owner_id=uuid4(), status="Gone")
        uow.profiles.get_all.return_value = [profile, orphan]
        uow.accounts.get_many.return_value = {account.id: account}

        views = await service.list_all()

        assert [v.owner_name for v in views] == ["Dev", None]


# --- experience / education ---


class TestSubCollections:
    async def test_add_experience_goes_first(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        profile: Profile,
        user_id: UUID,
    ):
        existing = _experience("Junior")
        profile.experience = [existing]
        uow.profiles.get_by_owner.return_value = profile
        uow.profiles.update.side_effect = lambda p: p

        entry = _experience("Senior")
        result = await service.add_experience(user_id, entry)

        assert result.experience == [entry, existing]
        assert uow.committed

    async def test_add_experience_without_profile_raises(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_owner.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.add_experience(user_id, _experience())

        uow.profiles.update.assert_not_called()

    async def test_remove_experience(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        profile: Profile,
        user_id: UUID,
    ):
        keep, drop = _experience("Keep"), _experience("Drop")
        profile.experience = [keep, drop]
        uow.profiles.get_by_owner.return_value = profile
        uow.profiles.update.side_effect = lambda p: p

        result = await service.remove_experience(user_id, drop.id)

        assert result.experience == [keep]

    async def test_remove_unknown_experience_leaves_profile_unchanged(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        profile: Profile,
        user_id: UUID,
    ):
        entry = _experience()
        profile.experience = [entry]
        uow.profiles.get_by_owner.return_value = profile

        with pytest.raises(ExperienceNotFoundError):
            await service.remove_experience(user_id, uuid4())

        assert profile.experience == [entry]
        uow.profiles.update.assert_not_called()

    async def test_add_and_remove_education(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        profile: Profile,
        user_id: UUID,
    ):
        uow.profiles.get_by_owner.return_value = profile
        uow.profiles.update.side_effect = lambda p: p
        entry = EducationEntry(
            school="MIT",
            degree="BSc",
            field_of_study="CS",
            from_date=date(2015, 9, 1),
            to_date=date(2019, 6, 1),
        )

        added = await service.add_education(user_id, entry)
        assert added.education == [entry]

        removed = await service.remove_education(user_id, entry.id)
        assert removed.education == []

    async def test_remove_unknown_education_raises(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        profile: Profile,
        user_id: UUID,
    ):
        uow.profiles.get_by_owner.return_value = profile

        with pytest.raises(EducationNotFoundError):
            await service.remove_education(user_id, uuid4())
