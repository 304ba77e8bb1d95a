"""Build the canonical field set for a profile create-or-replace."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from core.exceptions import ValidationError
from domain.entities.profile import SOCIAL_NETWORKS, SocialLinks

# Written only when the caller sent them; everything else is always written.
PASSTHROUGH_FIELDS = ("company", "location", "bio", "github_username")


@dataclass(frozen=True, slots=True)
class NormalizerConfig:
    """Options for profile normalization.

    ``skills_leading_space`` keeps the historical behaviour of prefixing each
    comma-split skill with one space, for clients that depend on it.
    """

    skills_leading_space: bool = False


def normalize_skills(value: str | list[str], leading_space: bool = False) -> list[str]:
    """Turn a skills field into an ordered list.

    Lists are used as-is. Strings are split on commas and each element is
    trimmed; in legacy mode every element becomes ``" " + trimmed`` and empty
    elements are kept.
    """
    if isinstance(value, list):
        return list(value)

    parts = value.split(",")
    if leading_space:
        return [" " + part.strip() for part in parts]
    return [part.strip() for part in parts if part.strip()]


def normalize_url(value: str | None, field: str = "url") -> str:
    """Rewrite a user-supplied link to a canonical absolute HTTPS URL.

    Empty input yields ``""``. A missing scheme becomes ``https://`` and
    ``http`` is upgraded. The host is lower-cased with any leading ``www.``
    removed; credentials, default ports and trailing slashes are dropped.

    Raises:
        ValidationError: If the value cannot be parsed as a web URL
    """
    raw = (value or "").strip()
    if not raw:
        return ""

    if raw.startswith("//"):
        raw = f"https:{raw}"
    elif "://" not in raw:
        raw = f"https://{raw}"

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ValidationError(f"Invalid URL: {value}", field=field) from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise ValidationError(f"Invalid URL: {value}", field=field)

    host = url.host
    if host.startswith("www.") and host.count(".") >= 2:
        host = host[4:]

    if ":" in host:
        host = f"[{host}]"

    port = url.port
    netloc = host if port in (None, 443) else f"{host}:{port}"

    path, _, query = url.raw_path.decode("ascii").partition("?")
    path = path.rstrip("/")

    normalized = f"https://{netloc}{path}"
    if query:
        normalized = f"{normalized}?{query}"
    if url.fragment:
        normalized = f"{normalized}#{url.fragment}"
    return normalized


def build_profile_fields(
    payload: Mapping[str, Any], config: NormalizerConfig = NormalizerConfig()
) -> dict[str, Any]:
    """Build the fields written by a profile upsert.

    ``status``, ``skills``, ``website`` and ``social`` are always present in
    the result; the passthrough fields only when present in ``payload``.
    Sub-collections are never included.

    Raises:
        ValidationError: If status or skills is missing, or a link is invalid
    """
    status = payload.get("status")
    if not status:
        raise ValidationError("Status is required", field="status")

    # A string of only commas still counts as missing in fixed mode
    skills = normalize_skills(
        payload.get("skills") or [], leading_space=config.skills_leading_space
    )
    if not skills:
        raise ValidationError("Skills is required", field="skills")

    fields: dict[str, Any] = {
        "status": status,
        "skills": skills,
        "website": normalize_url(payload.get("website"), field="website"),
        "social": SocialLinks(
            **{
                network: normalize_url(payload.get(network), field=network)
                for network in SOCIAL_NETWORKS
            }
        ),
    }

    for key in PASSTHROUGH_FIELDS:
        if key in payload:
            fields[key] = payload[key]

    return fields
