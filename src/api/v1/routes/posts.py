"""Post API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_post_service
from api.v1.schemas.post import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeListResponse,
    LikeResponse,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
)
from core.rate_limit import limiter
from domain.entities.post import Post
from domain.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post(
    "",
    response_model=PostDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={404: {"description": "The caller's account no longer exists"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_post(
    request: Request,
    body: PostCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Create a post. The author's current name and avatar are stored with it."""
    post = await service.create(user.id, body.text)
    return PostDetailResponse(data=_build_post_response(post))


@router.get(
    "",
    response_model=PostListResponse,
    summary="List all posts",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_posts(
    request: Request,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostListResponse:
    """Get all posts, newest first."""
    posts = await service.list_all()
    return PostListResponse(data=[_build_post_response(post) for post in posts])


@router.get(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Get a post",
    responses={404: {"description": "Post not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_post(
    request: Request,
    post_id: UUID,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Get a post by ID."""
    post = await service.get(post_id)
    return PostDetailResponse(data=_build_post_response(post))


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
    responses={
        204: {"description": "Post deleted"},
        403: {"description": "Not the post's author"},
        404: {"description": "Post not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_post(
    request: Request,
    post_id: UUID,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> None:
    """Delete a post. Only its author may do so."""
    await service.delete(post_id, user.id)
    return None


@router.put(
    "/{post_id}/like",
    response_model=LikeListResponse,
    summary="Like a post",
    responses={
        404: {"description": "Post not found"},
        409: {"description": "Post already liked"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def like_post(
    request: Request,
    post_id: UUID,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> LikeListResponse:
    """Like a post and return its likes, newest first."""
    likes = await service.like(post_id, user.id)
    return LikeListResponse(data=[LikeResponse.model_validate(like) for like in likes])


@router.put(
    "/{post_id}/unlike",
    response_model=LikeListResponse,
    summary="Unlike a post",
    responses={
        404: {"description": "Post not found"},
        409: {"description": "Post has not yet been liked"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def unlike_post(
    request: Request,
    post_id: UUID,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> LikeListResponse:
    """Withdraw the caller's like and return the remaining likes."""
    likes = await service.unlike(post_id, user.id)
    return LikeListResponse(data=[LikeResponse.model_validate(like) for like in likes])


@router.post(
    "/{post_id}/comments",
    response_model=CommentListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
    responses={404: {"description": "Post or account not found"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_comment(
    request: Request,
    post_id: UUID,
    body: CommentCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> CommentListResponse:
    """Add a comment at the front of the post's comments and return them all."""
    comments = await service.add_comment(post_id, user.id, body.text)
    return CommentListResponse(
        data=[CommentResponse.model_validate(comment) for comment in comments]
    )


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_model=CommentListResponse,
    summary="Remove a comment",
    responses={
        403: {"description": "Not the comment's author"},
        404: {"description": "Post or comment not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_comment(
    request: Request,
    post_id: UUID,
    comment_id: UUID,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> CommentListResponse:
    """Remove one of the caller's comments and return the remaining comments."""
    comments = await service.remove_comment(post_id, comment_id, user.id)
    return CommentListResponse(
        data=[CommentResponse.model_validate(comment) for comment in comments]
    )


def _build_post_response(post: Post) -> PostResponse:
    """Convert domain entity to response schema."""
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        author_name=post.author_name,
        author_avatar=post.author_avatar,
        text=post.text,
        likes=[LikeResponse.model_validate(like) for like in post.likes],
        comments=[CommentResponse.model_validate(comment) for comment in post.comments],
        created_at=post.created_at,
    )
