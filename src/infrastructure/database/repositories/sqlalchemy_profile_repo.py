"""SQLAlchemy implementation of Profile repository."""

from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Callable
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError, ProfileNotFoundError
from domain.entities.profile import EducationEntry, ExperienceEntry, Profile, SocialLinks
from infrastructure.database.models import ProfileModel

_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _experience_to_dict(entry: ExperienceEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "title": entry.title,
        "company": entry.company,
        "location": entry.location,
        "from_date": entry.from_date.isoformat(),
        "to_date": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def _experience_from_dict(data: dict[str, Any]) -> ExperienceEntry:
    return ExperienceEntry(
        id=UUID(data["id"]),
        title=data["title"],
        company=data["company"],
        location=data.get("location"),
        from_date=date.fromisoformat(data["from_date"]),
        to_date=_parse_date(data.get("to_date")),
        current=data.get("current", False),
        description=data.get("description"),
    )


def _education_to_dict(entry: EducationEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "school": entry.school,
        "degree": entry.degree,
        "field_of_study": entry.field_of_study,
        "from_date": entry.from_date.isoformat(),
        "to_date": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def _education_from_dict(data: dict[str, Any]) -> EducationEntry:
    return EducationEntry(
        id=UUID(data["id"]),
        school=data["school"],
        degree=data["degree"],
        field_of_study=data["field_of_study"],
        from_date=date.fromisoformat(data["from_date"]),
        to_date=_parse_date(data.get("to_date")),
        current=data.get("current", False),
        description=data.get("description"),
    )


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_owner(self, owner_id: UUID) -> Profile | None:
        """Get the profile owned by an account."""
        stmt = select(ProfileModel).where(ProfileModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Profile]:
        """Get every profile."""
        stmt = select(ProfileModel).order_by(ProfileModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def upsert_by_owner(self, owner_id: UUID, fields: dict[str, Any]) -> Profile:
        """Insert the owner's profile or overwrite ``fields`` in a single statement.

        Uses ``INSERT ... ON CONFLICT (owner_id) DO UPDATE`` so two concurrent
        first saves can never produce two profiles for one owner.
        """
        values = dict(fields)
        if isinstance(values.get("social"), SocialLinks):
            values["social"] = asdict(values["social"])

        now = datetime.utcnow()
        row = {
            "id": uuid4(),
            "owner_id": owner_id,
            "website": "",
            "skills": [],
            "social": asdict(SocialLinks()),
            "experience": [],
            "education": [],
            "created_at": now,
            "updated_at": now,
            "version": 1,
            **values,
        }

        dialect = self._session.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Profile upsert is not supported on {dialect}")

        stmt = insert(ProfileModel).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProfileModel.owner_id],
            set_={
                **values,
                "updated_at": now,
                "version": ProfileModel.version + 1,
            },
        )
        await self._session.execute(stmt)

        reload = (
            select(ProfileModel)
            .where(ProfileModel.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(reload)
        return self._to_entity(result.scalar_one())

    async def update(self, profile: Profile) -> Profile:
        """Save the whole profile document."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ProfileNotFoundError(str(profile.owner_id))
        if model.version != profile.version:
            raise ConcurrentUpdateError("profile")

        model.status = profile.status
        model.company = profile.company
        model.location = profile.location
        model.bio = profile.bio
        model.github_username = profile.github_username
        model.website = profile.website
        model.skills = list(profile.skills)
        model.social = asdict(profile.social)
        model.experience = [_experience_to_dict(e) for e in profile.experience]
        model.education = [_education_to_dict(e) for e in profile.education]
        model.updated_at = profile.updated_at

        # A stale version surfaces here as StaleDataError
        await self._session.flush()
        return self._to_entity(model)

    async def delete_by_owner(self, owner_id: UUID) -> bool:
        """Delete the owner's profile."""
        stmt = delete(ProfileModel).where(ProfileModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            owner_id=model.owner_id,
            status=model.status,
            company=model.company,
            location=model.location,
            bio=model.bio,
            github_username=model.github_username,
            website=model.website or "",
            skills=list(model.skills or []),
            social=SocialLinks(**(model.social or {})),
            experience=[_experience_from_dict(e) for e in model.experience or []],
            education=[_education_from_dict(e) for e in model.education or []],
            created_at=model.created_at,
            updated_at=model.updated_at,
            version=model.version,
        )
