"""Post domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Like:
    """One account's like on a post."""

    account_id: UUID
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Comment:
    """A comment on a post.

    Author name and avatar are captured when the comment is written and are
    not kept in sync with later account changes.
    """

    author_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    author_name: str | None = None
    author_avatar: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Post:
    """Domain entity for a Post.

    ``likes`` and ``comments`` are ordered newest first.
    """

    author_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    author_name: str | None = None
    author_avatar: str | None = None
    likes: list[Like] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 1
