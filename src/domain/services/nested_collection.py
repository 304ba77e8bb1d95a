"""Mutations on ordered sub-collections embedded in a parent document.

All helpers are pure: they never mutate the list they receive and return a
new list for the caller to assign back before saving the parent. Entries are
kept newest first.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar
from uuid import UUID

from core.exceptions import AlreadyLikedError, AppException, NotLikedError
from domain.services.ownership import ensure_owner


class Identified(Protocol):
    id: UUID


class AccountKeyed(Protocol):
    account_id: UUID


EntryT = TypeVar("EntryT")
IdentifiedT = TypeVar("IdentifiedT", bound=Identified)
MemberT = TypeVar("MemberT", bound=AccountKeyed)


def insert_front(entries: Sequence[EntryT], entry: EntryT) -> list[EntryT]:
    """Return a new list with ``entry`` first. No duplicate check."""
    return [entry, *entries]


def has_member(entries: Sequence[AccountKeyed], account_id: UUID) -> bool:
    return any(entry.account_id == account_id for entry in entries)


def toggle_membership(
    entries: Sequence[MemberT],
    account_id: UUID,
    *,
    add: bool,
    make_entry: Callable[[], MemberT],
    document_id: str,
) -> list[MemberT]:
    """Add or remove the caller's single membership entry.

    Repeating the same direction is rejected rather than absorbed.

    Raises:
        AlreadyLikedError: Adding when an entry for the account exists
        NotLikedError: Removing when no entry for the account exists
    """
    present = has_member(entries, account_id)
    if add:
        if present:
            raise AlreadyLikedError(document_id)
        return insert_front(entries, make_entry())

    if not present:
        raise NotLikedError(document_id)
    return [entry for entry in entries if entry.account_id != account_id]


def remove_by_id(
    entries: Sequence[IdentifiedT],
    entry_id: UUID,
    *,
    not_found: Callable[[str], AppException],
    caller_id: UUID | None = None,
    resource: str = "entry",
) -> list[IdentifiedT]:
    """Return ``entries`` without the entry whose id is ``entry_id``.

    When ``caller_id`` is given the entry must carry an ``author_id`` and
    only its author may remove it. The relative order of the remaining
    entries is preserved.

    Raises:
        AppException: ``not_found(entry_id)`` if no entry matches
        AuthorizationError: If the caller is not the entry's author
    """
    target = next((entry for entry in entries if entry.id == entry_id), None)
    if target is None:
        raise not_found(str(entry_id))

    if caller_id is not None:
        author_id = target.author_id  # type: ignore[attr-defined]
        ensure_owner(caller_id, author_id, resource=resource)

    return [entry for entry in entries if entry.id != entry_id]
