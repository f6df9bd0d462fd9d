"""Map classified fields to profile-derived values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .field_classifier import FieldType
from .form_models import ClassifiedField, DetectionResult
from .profile import UserProfile

ValueResolver = Callable[[UserProfile], Optional[str]]

SKIP_FILE_INPUT = "file_input"
SKIP_NO_VALUE = "no_value"
SKIP_ALREADY_FILLED = "already_filled"


def _join_skills(profile: UserProfile) -> Optional[str]:
    return ", ".join(profile.skills) if profile.skills else None


VALUE_RESOLVERS: Dict[FieldType, ValueResolver] = {
    FieldType.FULL_NAME: UserProfile.display_name,
    FieldType.FIRST_NAME: lambda profile: profile.first_name,
    FieldType.LAST_NAME: lambda profile: profile.last_name,
    FieldType.EMAIL: lambda profile: profile.email,
    FieldType.PHONE: lambda profile: profile.phone,
    FieldType.LINKEDIN: lambda profile: profile.linkedin,
    FieldType.PORTFOLIO: lambda profile: profile.portfolio,
    FieldType.SKILLS: _join_skills,
    FieldType.LOCATION: lambda profile: profile.preferred_locations,
    FieldType.EXPERIENCE: lambda profile: profile.experience,
    FieldType.EDUCATION: lambda profile: profile.education,
    FieldType.SALARY: lambda profile: profile.salary_expectation,
    FieldType.AVAILABILITY: lambda profile: profile.availability,
    FieldType.VISA: lambda profile: profile.work_authorization,
}


@dataclass(slots=True)
class FieldAssignment:
    field: ClassifiedField
    value: str


@dataclass(slots=True)
class FieldDecision:
    field: ClassifiedField
    planned: bool
    reason: Optional[str]


def resolve_value(field_type: FieldType, profile: UserProfile) -> Optional[str]:
    resolver = VALUE_RESOLVERS.get(field_type)
    if resolver is None:
        return None
    value = resolver(profile)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def plan_assignments(
    result: DetectionResult,
    profile: UserProfile,
    *,
    overwrite: bool = False,
) -> Tuple[List[FieldAssignment], List[FieldDecision]]:
    assignments: List[FieldAssignment] = []
    decisions: List[FieldDecision] = []

    for item in result.fields:
        value: Optional[str] = None
        reason: Optional[str] = None
        if item.is_file:
            reason = SKIP_FILE_INPUT
        else:
            value = resolve_value(item.field_type, profile)
            if value is None:
                reason = SKIP_NO_VALUE
            elif item.already_filled and not overwrite:
                reason = SKIP_ALREADY_FILLED

        if value is None or reason:
            decisions.append(FieldDecision(field=item, planned=False, reason=reason))
            continue
        assignments.append(FieldAssignment(field=item, value=value))
        decisions.append(FieldDecision(field=item, planned=True, reason=None))

    return assignments, decisions


__all__ = [
    "VALUE_RESOLVERS",
    "FieldAssignment",
    "FieldDecision",
    "resolve_value",
    "plan_assignments",
]
