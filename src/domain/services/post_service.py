"""Post service layer with business logic."""

from collections.abc import Callable
from typing import TypeVar
from uuid import UUID

import structlog

from core.exceptions import AccountNotFoundError, CommentNotFoundError, PostNotFoundError
from domain.entities.account import Account
from domain.entities.post import Comment, Like, Post
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.nested_collection import insert_front, remove_by_id, toggle_membership
from domain.services.ownership import ensure_owner
from domain.services.store_guard import StorePolicy, run_guarded

logger = structlog.get_logger()

R = TypeVar("R")


class PostService:
    """Service layer for Post business logic.

    Like and comment operations return the post's updated sub-collection
    rather than the whole post.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        policy: StorePolicy = StorePolicy(),
    ) -> None:
        self._uow_factory = uow_factory
        self._policy = policy

    async def create(self, author_id: UUID, text: str) -> Post:
        """Create a post, capturing the author's current name and avatar."""

        async def operation() -> Post:
            async with self._uow_factory() as uow:
                author = await self._require_account(uow, author_id)
                post = Post(
                    author_id=author_id,
                    text=text,
                    author_name=author.display_name,
                    author_avatar=author.avatar_url,
                )
                created = await uow.posts.create(post)
                await uow.commit()
                return created

        post = await run_guarded(self._policy, operation, name="post.create")
        logger.info("post_created", post_id=str(post.id), author_id=str(author_id))
        return post

    async def list_all(self) -> list[Post]:
        """Get all posts, newest first."""

        async def operation() -> list[Post]:
            async with self._uow_factory() as uow:
                return await uow.posts.get_all()  # type: ignore[no-any-return]

        return await run_guarded(self._policy, operation, name="post.list")

    async def get(self, post_id: UUID) -> Post:
        """Get a post by ID."""

        async def operation() -> Post:
            async with self._uow_factory() as uow:
                post = await uow.posts.get(post_id)
                if not post:
                    raise PostNotFoundError(str(post_id))
                return post

        return await run_guarded(self._policy, operation, name="post.get")

    async def delete(self, post_id: UUID, user_id: UUID) -> None:
        """Delete a post. Only its author may do so."""

        async def operation() -> None:
            async with self._uow_factory() as uow:
                post = await uow.posts.get(post_id)
                if not post:
                    raise PostNotFoundError(str(post_id))
                ensure_owner(user_id, post.author_id, resource="post")

                await uow.posts.delete(post_id)
                await uow.commit()

        await run_guarded(self._policy, operation, name="post.delete")
        logger.info("post_deleted", post_id=str(post_id), author_id=str(user_id))

    async def like(self, post_id: UUID, user_id: UUID) -> list[Like]:
        """Like a post. Liking twice is a conflict."""

        def mutate(post: Post) -> list[Like]:
            post.likes = toggle_membership(
                post.likes,
                user_id,
                add=True,
                make_entry=lambda: Like(account_id=user_id),
                document_id=str(post_id),
            )
            return post.likes

        return await self._mutate(post_id, mutate, name="post.like")

    async def unlike(self, post_id: UUID, user_id: UUID) -> list[Like]:
        """Withdraw a like. Unliking a post not liked is a conflict."""

        def mutate(post: Post) -> list[Like]:
            post.likes = toggle_membership(
                post.likes,
                user_id,
                add=False,
                make_entry=lambda: Like(account_id=user_id),
                document_id=str(post_id),
            )
            return post.likes

        return await self._mutate(post_id, mutate, name="post.unlike")

    async def add_comment(self, post_id: UUID, user_id: UUID, text: str) -> list[Comment]:
        """Add a comment at the front of the post's comments."""
        author = await self.get_author(user_id)
        comment = Comment(
            author_id=user_id,
            text=text,
            author_name=author.display_name,
            author_avatar=author.avatar_url,
        )

        def mutate(post: Post) -> list[Comment]:
            post.comments = insert_front(post.comments, comment)
            return post.comments

        return await self._mutate(post_id, mutate, name="post.add_comment")

    async def remove_comment(
        self, post_id: UUID, comment_id: UUID, user_id: UUID
    ) -> list[Comment]:
        """Remove a comment. Only the comment's author may do so."""

        def mutate(post: Post) -> list[Comment]:
            post.comments = remove_by_id(
                post.comments,
                comment_id,
                not_found=CommentNotFoundError,
                caller_id=user_id,
                resource="comment",
            )
            return post.comments

        return await self._mutate(post_id, mutate, name="post.remove_comment")

    async def get_author(self, user_id: UUID) -> Account:
        """Fresh account data for the caller; the account may have been deleted."""

        async def operation() -> Account:
            async with self._uow_factory() as uow:
                return await self._require_account(uow, user_id)

        return await run_guarded(self._policy, operation, name="post.get_author")

    # --- Helpers ---

    async def _require_account(self, uow: IUnitOfWork, account_id: UUID) -> Account:
        account = await uow.accounts.get(account_id)
        if not account:
            raise AccountNotFoundError(str(account_id))
        return account

    async def _mutate(
        self,
        post_id: UUID,
        mutate: Callable[[Post], R],
        name: str,
    ) -> R:
        """Load, mutate and save a post, retrying on a version race.

        ``mutate`` runs against a freshly loaded post on every attempt, so
        membership checks always see the latest saved likes.
        """

        async def operation() -> R:
            async with self._uow_factory() as uow:
                post = await uow.posts.get(post_id)
                if not post:
                    raise PostNotFoundError(str(post_id))

                result = mutate(post)

                await uow.posts.update(post)
                await uow.commit()
                return result

        return await run_guarded(self._policy, operation, name=name, retry_on_conflict=True)
