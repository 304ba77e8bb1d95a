"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    EducationCreate,
    EducationResponse,
    ExperienceCreate,
    ExperienceResponse,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpsert,
    SocialLinksResponse,
)
from core.rate_limit import limiter
from domain.entities.profile import EducationEntry, ExperienceEntry, Profile, ProfileView
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List all profiles",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Get every profile with its owner's name and avatar. Public."""
    views = await service.list_all()
    return ProfileListResponse(data=[_build_view_response(view) for view in views])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get the caller's profile",
    responses={404: {"description": "There is no profile for this user"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile."""
    view = await service.get_for_owner(user.id)
    return ProfileDetailResponse(data=_build_view_response(view))


@router.get(
    "/user/{owner_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile by account",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile_by_owner(
    request: Request,
    owner_id: UUID,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile owned by an account. Public."""
    view = await service.get_for_owner(owner_id)
    return ProfileDetailResponse(data=_build_view_response(view))


@router.post(
    "",
    response_model=ProfileDetailResponse,
    summary="Create or update the caller's profile",
    responses={
        200: {"description": "Profile saved"},
        400: {"description": "A link could not be normalized"},
        422: {"description": "Status or skills missing"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upsert_profile(
    request: Request,
    body: ProfileUpsert,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Create the caller's profile, or overwrite the fields sent.

    `skills` may be a list or a comma-separated string. Website and social
    links are rewritten to absolute HTTPS URLs. Experience and education
    entries are not affected.
    """
    profile = await service.upsert(user.id, body.model_dump(exclude_unset=True))
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.put(
    "/experience",
    response_model=ProfileDetailResponse,
    summary="Add an experience entry",
    responses={404: {"description": "There is no profile for this user"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_experience(
    request: Request,
    body: ExperienceCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add a work-experience entry at the front of the caller's profile."""
    entry = ExperienceEntry(
        title=body.title,
        company=body.company,
        location=body.location,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = await service.add_experience(user.id, entry)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/experience/{entry_id}",
    response_model=ProfileDetailResponse,
    summary="Remove an experience entry",
    responses={404: {"description": "Profile or entry not found"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_experience(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove a work-experience entry from the caller's profile."""
    profile = await service.remove_experience(user.id, entry_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.put(
    "/education",
    response_model=ProfileDetailResponse,
    summary="Add an education entry",
    responses={404: {"description": "There is no profile for this user"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_education(
    request: Request,
    body: EducationCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add an education entry at the front of the caller's profile."""
    entry = EducationEntry(
        school=body.school,
        degree=body.degree,
        field_of_study=body.field_of_study,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = await service.add_education(user.id, entry)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/education/{entry_id}",
    response_model=ProfileDetailResponse,
    summary="Remove an education entry",
    responses={404: {"description": "Profile or entry not found"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_education(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove an education entry from the caller's profile."""
    profile = await service.remove_education(user.id, entry_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


def _build_view_response(view: ProfileView) -> ProfileResponse:
    return _build_profile_response(view.profile, view.owner_name, view.owner_avatar)


def _build_profile_response(
    profile: Profile,
    owner_name: str | None = None,
    owner_avatar: str | None = None,
) -> ProfileResponse:
    """Convert domain entity to response schema."""
    return ProfileResponse(
        id=profile.id,
        owner_id=profile.owner_id,
        owner_name=owner_name,
        owner_avatar=owner_avatar,
        status=profile.status,
        company=profile.company,
        location=profile.location,
        bio=profile.bio,
        github_username=profile.github_username,
        website=profile.website,
        skills=profile.skills,
        social=SocialLinksResponse.model_validate(profile.social),
        experience=[ExperienceResponse.model_validate(e) for e in profile.experience],
        education=[EducationResponse.model_validate(e) for e in profile.education],
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )
