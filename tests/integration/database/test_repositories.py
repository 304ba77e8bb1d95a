"""Integration tests for the SQLAlchemy repositories and unit of work."""

from uuid import uuid4

import pytest

from core.exceptions import ConcurrentUpdateError
from domain.entities.account import Account
from domain.entities.post import Like, Post
from domain.entities.profile import SocialLinks


@pytest.fixture
async def account(uow_factory) -> Account:
    async with uow_factory() as uow:
        saved = await uow.accounts.upsert(Account(email="repo@example.com", display_name="Repo"))
        await uow.commit()
    return saved


class TestAccountRepository:
    @pytest.mark.asyncio
    async def test_upsert_refreshes_existing(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            await uow.accounts.upsert(
                Account(id=account.id, email=account.email, display_name="Renamed")
            )
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.accounts.get(account.id)

        assert stored is not None
        assert stored.display_name == "Renamed"

    @pytest.mark.asyncio
    async def test_get_many_skips_unknown_ids(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            found = await uow.accounts.get_many([account.id, uuid4()])

        assert list(found) == [account.id]


class TestProfileRepository:
    @pytest.mark.asyncio
    async def test_upsert_creates_one_profile_per_owner(self, uow_factory, account: Account):
        fields = {"status": "Dev", "skills": ["go"], "website": "", "social": SocialLinks()}

        async with uow_factory() as uow:
            first = await uow.profiles.upsert_by_owner(account.id, fields)
            await uow.commit()
        async with uow_factory() as uow:
            second = await uow.profiles.upsert_by_owner(
                account.id, {**fields, "status": "Lead", "company": "Acme"}
            )
            await uow.commit()

        assert second.id == first.id
        assert second.status == "Lead"
        assert second.company == "Acme"
        assert second.version == first.version + 1

        async with uow_factory() as uow:
            profiles = await uow.profiles.get_all()
        assert len(profiles) == 1

    @pytest.mark.asyncio
    async def test_stale_profile_update_is_rejected(self, uow_factory, account: Account):
        fields = {"status": "Dev", "skills": ["go"], "website": "", "social": SocialLinks()}
        async with uow_factory() as uow:
            await uow.profiles.upsert_by_owner(account.id, fields)
            await uow.commit()

        async with uow_factory() as uow:
            stale = await uow.profiles.get_by_owner(account.id)
        async with uow_factory() as uow:
            fresh = await uow.profiles.get_by_owner(account.id)
            fresh.bio = "winner"
            await uow.profiles.update(fresh)
            await uow.commit()

        stale.bio = "loser"
        with pytest.raises(ConcurrentUpdateError):
            async with uow_factory() as uow:
                await uow.profiles.update(stale)
                await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.profiles.get_by_owner(account.id)
        assert stored.bio == "winner"

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            assert await uow.profiles.delete_by_owner(account.id) is False


class TestPostRepository:
    @pytest.mark.asyncio
    async def test_likes_round_trip_through_json(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            post = await uow.posts.create(Post(author_id=account.id, text="hi"))
            await uow.commit()

        async with uow_factory() as uow:
            loaded = await uow.posts.get(post.id)
            loaded.likes = [Like(account_id=account.id)]
            updated = await uow.posts.update(loaded)
            await uow.commit()

        assert updated.version == post.version + 1
        async with uow_factory() as uow:
            stored = await uow.posts.get(post.id)
        assert [like.account_id for like in stored.likes] == [account.id]

    @pytest.mark.asyncio
    async def test_stale_post_update_is_rejected(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            post = await uow.posts.create(Post(author_id=account.id, text="hi"))
            await uow.commit()

        async with uow_factory() as uow:
            fresh = await uow.posts.get(post.id)
            fresh.likes = [Like(account_id=uuid4())]
            await uow.posts.update(fresh)
            await uow.commit()

        post.likes = [Like(account_id=account.id)]
        with pytest.raises(ConcurrentUpdateError):
            async with uow_factory() as uow:
                await uow.posts.update(post)
                await uow.commit()

    @pytest.mark.asyncio
    async def test_delete_by_author_counts_rows(self, uow_factory, account: Account):
        async with uow_factory() as uow:
            await uow.posts.create(Post(author_id=account.id, text="a"))
            await uow.posts.create(Post(author_id=account.id, text="b"))
            await uow.commit()

        async with uow_factory() as uow:
            count = await uow.posts.delete_by_author(account.id)
            await uow.commit()

        assert count == 2
