"""User profile snapshot and the client that fetches it from the dashboard."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import requests

from .config import EngineConfig
from .errors import NetworkFailureError, NotAuthenticatedError

PROFILE_ENDPOINT = "/api/auth/user"

_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id",),
    "email": ("email",),
    "first_name": ("firstName", "first_name"),
    "last_name": ("lastName", "last_name"),
    "full_name": ("fullName", "full_name"),
    "phone": ("phone",),
    "linkedin": ("linkedin", "linkedinUrl"),
    "portfolio": ("portfolio", "portfolioUrl", "website"),
    "preferred_locations": ("preferredLocations", "preferred_locations"),
    "desired_job_titles": ("desiredJobTitles", "desired_job_titles"),
    "industries": ("industries",),
    "experience": ("experience",),
    "education": ("education",),
    "salary_expectation": ("salaryExpectation", "salary_expectation"),
    "availability": ("availability",),
    "work_authorization": ("workAuthorization", "work_authorization"),
}


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Read-only profile snapshot; a missing attribute is ``None``, never ``""``."""

    id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None
    skills: Tuple[str, ...] = ()
    preferred_locations: Optional[str] = None
    desired_job_titles: Optional[str] = None
    industries: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    salary_expectation: Optional[str] = None
    availability: Optional[str] = None
    work_authorization: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserProfile":
        values: Dict[str, Any] = {}
        for attribute, aliases in _FIELD_ALIASES.items():
            values[attribute] = _first_text(payload, aliases)
        values["skills"] = _normalize_skills(payload.get("skills"))
        return cls(**values)

    def display_name(self) -> Optional[str]:
        if self.full_name:
            return self.full_name
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) or None

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["skills"] = list(self.skills)
        return data


def _first_text(payload: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _normalize_skills(raw: Any) -> Tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw if item is not None]
    else:
        return ()
    return tuple(item.strip() for item in items if item.strip())


def mask_email(email: Optional[str]) -> str:
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"


def load_profile_file(path: Path) -> UserProfile:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Profile file {path} must contain a JSON object")
    return UserProfile.from_dict(payload)


def build_http_session(config: EngineConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    if config.api_token:
        session.headers["Authorization"] = f"Bearer {config.api_token}"
    if config.session_cookie:
        session.headers["Cookie"] = config.session_cookie
    return session


class ProfileClient:
    """Fetches the signed-in user's profile from the dashboard backend."""

    def __init__(
        self,
        config: EngineConfig,
        *,
        http: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.http = http or build_http_session(config)
        self.logger = logger or logging.getLogger(__name__)

    def fetch(self) -> UserProfile:
        url = self.config.endpoint(PROFILE_ENDPOINT)
        try:
            response = self.http.get(url, timeout=self.config.request_timeout)
        except requests.RequestException as exc:
            self.logger.warning("Profile request to %s failed: %s", url, exc)
            raise NetworkFailureError(f"Profile request failed: {exc}") from exc

        if response.status_code in (401, 403):
            self.logger.info("Profile request rejected: not signed in")
            raise NotAuthenticatedError("Profile provider reported no signed-in user")
        if not response.ok:
            self.logger.warning(
                "Profile request returned HTTP %s", response.status_code
            )
            raise NetworkFailureError(
                f"Profile request returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkFailureError("Profile response was not valid JSON") from exc
        if not isinstance(payload, dict) or not payload:
            raise NotAuthenticatedError("Profile provider returned no user")

        profile = UserProfile.from_dict(payload)
        self.logger.debug("Loaded profile for %s", mask_email(profile.email))
        return profile


__all__ = [
    "UserProfile",
    "ProfileClient",
    "load_profile_file",
    "build_http_session",
    "mask_email",
]
