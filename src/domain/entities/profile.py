"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from core.exceptions import ValidationError

SOCIAL_NETWORKS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


def _check_date_range(from_date: date, to_date: date | None) -> None:
    if to_date is not None and not from_date < to_date:
        raise ValidationError("'from' date must precede 'to' date", field="from_date")


@dataclass
class SocialLinks:
    """Normalized social network URLs. Empty string means not set."""

    youtube: str = ""
    twitter: str = ""
    facebook: str = ""
    linkedin: str = ""
    instagram: str = ""


@dataclass
class ExperienceEntry:
    """A single work-experience entry on a profile."""

    title: str
    company: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        _check_date_range(self.from_date, self.to_date)


@dataclass
class EducationEntry:
    """A single education entry on a profile."""

    school: str
    degree: str
    field_of_study: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    to_date: date | None = None
    current: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        _check_date_range(self.from_date, self.to_date)


@dataclass
class Profile:
    """Domain entity for a developer profile, one per account.

    ``experience`` and ``education`` are ordered newest first.
    """

    owner_id: UUID
    status: str
    id: UUID = field(default_factory=uuid4)
    company: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = None
    website: str = ""
    skills: list[str] = field(default_factory=list)
    social: SocialLinks = field(default_factory=SocialLinks)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: list[EducationEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 1

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


@dataclass(frozen=True, slots=True)
class ProfileView:
    """Read-only value object: a Profile with its owner's public identity."""

    profile: Profile
    owner_name: str | None
    owner_avatar: str | None
