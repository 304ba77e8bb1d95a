"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.account_service import AccountService
from domain.services.post_service import PostService
from domain.services.profile_normalizer import NormalizerConfig
from domain.services.profile_service import ProfileService
from domain.services.store_guard import StorePolicy
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


def get_store_policy() -> StorePolicy:
    """Store access policy from settings."""
    return StorePolicy(
        timeout_seconds=settings.store_timeout_seconds,
        max_attempts=settings.mutation_max_attempts,
    )


@lru_cache
def get_account_service() -> AccountService:
    """Get Account service instance."""
    return AccountService(get_uow_factory(), policy=get_store_policy())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        policy=get_store_policy(),
        normalizer=NormalizerConfig(skills_leading_space=settings.skills_leading_space),
    )


@lru_cache
def get_post_service() -> PostService:
    """Get Post service instance."""
    return PostService(get_uow_factory(), policy=get_store_policy())
