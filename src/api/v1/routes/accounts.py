"""Account API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_account_service
from api.v1.schemas.account import AccountDetailResponse, AccountResponse
from core.exceptions import ValidationError
from core.rate_limit import limiter
from domain.entities.account import Account
from domain.services.account_service import AccountService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post(
    "/me",
    response_model=AccountDetailResponse,
    summary="Sync the caller's account",
    responses={
        200: {"description": "Account created or refreshed from the token"},
        400: {"description": "Token carries no email"},
        409: {"description": "Email is already used by another account"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sync_account(
    request: Request,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """
    Create or refresh the caller's account from the verified token claims.

    Without an avatar claim the account gets a Gravatar derived from its email.
    """
    if not user.email:
        raise ValidationError("Token carries no email claim", field="email")
    account = await service.sync(
        account_id=user.id,
        email=user.email,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
    )
    return AccountDetailResponse(data=_build_account_response(account))


@router.get(
    "/me",
    response_model=AccountDetailResponse,
    summary="Get the caller's account",
    responses={404: {"description": "Account not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_account(
    request: Request,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """Get the account the caller's token was issued to."""
    account = await service.get(user.id)
    return AccountDetailResponse(data=_build_account_response(account))


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete the caller's account",
    responses={
        204: {"description": "Posts, profile and account deleted"},
        503: {"description": "A deletion step failed; completed steps are not undone"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_my_account(
    request: Request,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> None:
    """
    Delete the caller's posts, profile and account.

    Likes and comments left on other users' posts are kept.
    """
    await service.delete_account(user.id)
    return None


def _build_account_response(account: Account) -> AccountResponse:
    """Convert domain entity to response schema."""
    return AccountResponse(
        id=account.id,
        email=account.email,
        display_name=account.display_name,
        avatar_url=account.avatar_url,
        created_at=account.created_at,
    )
