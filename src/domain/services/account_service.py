"""Account service: identity sync, lookup and the deletion cascade."""

import asyncio
import hashlib
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import AccountNotFoundError, EmailTakenError
from domain.entities.account import Account
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.store_guard import StorePolicy, run_guarded

logger = structlog.get_logger()


def gravatar_url(email: str) -> str:
    """Default avatar for an email address (200px, rated pg, mystery-man fallback)."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s=200&r=pg&d=mm"


class AccountService:
    """Service layer for Account business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        policy: StorePolicy = StorePolicy(),
    ) -> None:
        self._uow_factory = uow_factory
        self._policy = policy

    async def sync(
        self,
        account_id: UUID,
        email: str,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Account:
        """Create or refresh an account from verified token claims."""

        async def operation() -> Account:
            async with self._uow_factory() as uow:
                account = Account(
                    id=account_id,
                    email=email,
                    display_name=display_name,
                    avatar_url=avatar_url or gravatar_url(email),
                    updated_at=datetime.utcnow(),
                )
                try:
                    saved = await uow.accounts.upsert(account)
                    await uow.commit()
                except IntegrityError as exc:
                    await uow.rollback()
                    # Only the email uniqueness constraint is a client error
                    orig = str(exc.orig).lower() if exc.orig else ""
                    if ("unique" in orig or "duplicate" in orig) and "email" in orig:
                        raise EmailTakenError(email) from exc
                    raise
                return saved

        return await run_guarded(self._policy, operation, name="account.sync")

    async def get(self, account_id: UUID) -> Account:
        """Get an account by ID."""

        async def operation() -> Account:
            async with self._uow_factory() as uow:
                account = await uow.accounts.get(account_id)
                if not account:
                    raise AccountNotFoundError(str(account_id))
                return account

        return await run_guarded(self._policy, operation, name="account.get")

    async def delete_account(self, account_id: UUID) -> None:
        """Delete the account's posts, profile and the account itself.

        The three deletions run concurrently, each in its own unit of work.
        This is a best-effort cascade: a failed step does not undo the steps
        that completed. Once all steps have settled the first failure, in
        step order, is raised.
        """

        async def delete_posts() -> int:
            async with self._uow_factory() as uow:
                count = await uow.posts.delete_by_author(account_id)
                await uow.commit()
                return count

        async def delete_profile() -> bool:
            async with self._uow_factory() as uow:
                deleted = await uow.profiles.delete_by_owner(account_id)
                await uow.commit()
                return deleted

        async def delete_account_row() -> bool:
            async with self._uow_factory() as uow:
                deleted = await uow.accounts.delete(account_id)
                await uow.commit()
                return deleted

        steps = ("posts", "profile", "account")
        results = await asyncio.gather(
            run_guarded(self._policy, delete_posts, name="account.delete.posts"),
            run_guarded(self._policy, delete_profile, name="account.delete.profile"),
            run_guarded(self._policy, delete_account_row, name="account.delete.account"),
            return_exceptions=True,
        )

        failures = [
            (step, result)
            for step, result in zip(steps, results)
            if isinstance(result, BaseException)
        ]
        for step, error in failures:
            logger.error(
                "account_delete_step_failed",
                account_id=str(account_id),
                step=step,
                error=str(error),
                error_type=type(error).__name__,
            )
        if failures:
            raise failures[0][1]

        logger.info(
            "account_deleted",
            account_id=str(account_id),
            posts_deleted=results[0],
            profile_deleted=results[1],
            account_deleted=results[2],
        )
