"""SQLAlchemy implementation of Post repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError, PostNotFoundError
from domain.entities.post import Comment, Like, Post
from infrastructure.database.models import PostModel


def _like_to_dict(like: Like) -> dict[str, Any]:
    return {
        "account_id": str(like.account_id),
        "created_at": like.created_at.isoformat(),
    }


def _like_from_dict(data: dict[str, Any]) -> Like:
    return Like(
        account_id=UUID(data["account_id"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": str(comment.id),
        "author_id": str(comment.author_id),
        "author_name": comment.author_name,
        "author_avatar": comment.author_avatar,
        "text": comment.text,
        "created_at": comment.created_at.isoformat(),
    }


def _comment_from_dict(data: dict[str, Any]) -> Comment:
    return Comment(
        id=UUID(data["id"]),
        author_id=UUID(data["author_id"]),
        author_name=data.get("author_name"),
        author_avatar=data.get("author_avatar"),
        text=data["text"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        stmt = select(PostModel).where(PostModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Post]:
        """Get all posts, newest first."""
        stmt = select(PostModel).order_by(PostModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        model = self._to_model(post)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, post: Post) -> Post:
        """Save the whole post document."""
        stmt = select(PostModel).where(PostModel.id == post.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise PostNotFoundError(str(post.id))
        if model.version != post.version:
            raise ConcurrentUpdateError("post")

        model.text = post.text
        model.likes = [_like_to_dict(like) for like in post.likes]
        model.comments = [_comment_to_dict(comment) for comment in post.comments]

        # A stale version surfaces here as StaleDataError
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a post."""
        stmt = delete(PostModel).where(PostModel.id == id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def delete_by_author(self, author_id: UUID) -> int:
        """Delete every post written by an account."""
        stmt = delete(PostModel).where(PostModel.author_id == author_id)
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)

    def _to_entity(self, model: PostModel) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            author_id=model.author_id,
            text=model.text,
            author_name=model.author_name,
            author_avatar=model.author_avatar,
            likes=[_like_from_dict(like) for like in model.likes or []],
            comments=[_comment_from_dict(comment) for comment in model.comments or []],
            created_at=model.created_at,
            version=model.version,
        )

    def _to_model(self, entity: Post) -> PostModel:
        """Convert domain entity to ORM model."""
        return PostModel(
            id=entity.id,
            author_id=entity.author_id,
            text=entity.text,
            author_name=entity.author_name,
            author_avatar=entity.author_avatar,
            likes=[_like_to_dict(like) for like in entity.likes],
            comments=[_comment_to_dict(comment) for comment in entity.comments],
            created_at=entity.created_at,
        )
