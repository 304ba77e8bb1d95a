"""Unit tests for the ownership guard."""

from datetime import date
from uuid import uuid4

import pytest

from core.exceptions import AuthorizationError, ValidationError
from domain.entities.profile import ExperienceEntry
from domain.services.ownership import ensure_owner


def test_owner_allowed():
    owner = uuid4()

    ensure_owner(owner, owner, resource="post")


def test_other_caller_forbidden():
    with pytest.raises(AuthorizationError) as exc_info:
        ensure_owner(uuid4(), uuid4(), resource="post")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "User not authorized to modify this post"


def test_entry_dates_must_be_ordered():
    with pytest.raises(ValidationError):
        ExperienceEntry(
            title="Dev",
            company="Acme",
            from_date=date(2022, 1, 1),
            to_date=date(2021, 1, 1),
        )
