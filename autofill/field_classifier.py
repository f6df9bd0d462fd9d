"""Field classification heuristics for job-application forms.

Classification is a single pass over an ordered ladder of regular
expressions. The first pattern that matches wins, so more specific
categories (first/last name) sit above the broader ones (full name) that
would otherwise swallow them.

Label inference is best-effort: on pages with unconventional markup the
nearest label or colon-terminated text may belong to a different control.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Pattern, Sequence, Tuple

from .config import DEFAULT_MAX_LABEL_DEPTH
from .form_models import AncestorProbe, ClassifiedField, FieldDescriptor

MAX_LABEL_DEPTH = DEFAULT_MAX_LABEL_DEPTH
MAX_INLINE_LABEL_LENGTH = 100
UNKNOWN_LABEL = "unknown"


class FieldType(str, Enum):
    FULL_NAME = "full_name"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    PHONE = "phone"
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    EXPERIENCE = "experience"
    SKILLS = "skills"
    EDUCATION = "education"
    LINKEDIN = "linkedin"
    PORTFOLIO = "portfolio"
    SALARY = "salary"
    LOCATION = "location"
    AVAILABILITY = "availability"
    VISA = "visa"
    MOTIVATION = "motivation"
    QUESTIONS = "questions"
    NONE = "none"


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


_SEP = r"[\s_-]?"

FIELD_PATTERNS: List[Tuple[FieldType, Pattern[str]]] = [
    (
        FieldType.FIRST_NAME,
        _compile(rf"first{_SEP}name|given{_SEP}name|forename|\bfname\b"),
    ),
    (
        FieldType.LAST_NAME,
        _compile(rf"last{_SEP}name|family{_SEP}name|surname|\blname\b"),
    ),
    (FieldType.EMAIL, _compile(r"e-?mail")),
    (FieldType.PHONE, _compile(r"phone|mobile|\btel\b|\bcell\b")),
    (FieldType.LINKEDIN, _compile(rf"linked{_SEP}in")),
    (
        FieldType.PORTFOLIO,
        _compile(rf"portfolio|website|github|personal{_SEP}site|\burl\b"),
    ),
    (FieldType.COVER_LETTER, _compile(rf"cover{_SEP}letter")),
    (FieldType.RESUME, _compile(r"resume|résumé|\bcv\b|curriculum")),
    (
        FieldType.FULL_NAME,
        _compile(
            rf"full{_SEP}name|"
            r"^(?!.*\b(?:company|employer|organi[sz]ation|school|university|business"
            r"|user|file|referen\w*|referr\w*)\b)"
            r".*\bname\b"
        ),
    ),
    (
        FieldType.SALARY,
        _compile(rf"salary|compensation|pay{_SEP}expectation|\bpay\b"),
    ),
    (
        FieldType.VISA,
        _compile(
            rf"visa|sponsor|work{_SEP}authori[sz]ation|"
            rf"authori[sz]ed{_SEP}to{_SEP}work|right{_SEP}to{_SEP}work"
        ),
    ),
    (
        FieldType.AVAILABILITY,
        _compile(rf"availab|start{_SEP}date|notice{_SEP}period|earliest{_SEP}start"),
    ),
    (
        FieldType.MOTIVATION,
        _compile(
            r"motivat|\bwhy\b.*\b(?:company|position|role|job|team|us|join)\b"
        ),
    ),
    (
        FieldType.EDUCATION,
        _compile(r"education|degree|university|college|school|qualification"),
    ),
    (
        FieldType.EXPERIENCE,
        _compile(
            rf"experience|work{_SEP}history|employment{_SEP}history|background"
        ),
    ),
    (FieldType.SKILLS, _compile(r"skill|technolog|competenc")),
    (
        FieldType.LOCATION,
        _compile(r"location|address|\bcity\b|relocat|based\b"),
    ),
    (
        FieldType.QUESTIONS,
        _compile(
            rf"question|anything{_SEP}else|additional{_SEP}info|tell{_SEP}us|comments?\b"
        ),
    ),
]


def infer_label(
    descriptor: FieldDescriptor, *, max_depth: int = MAX_LABEL_DEPTH
) -> str:
    if descriptor.for_label and descriptor.for_label.strip():
        return descriptor.for_label.strip()

    inline = _label_from_ancestors(descriptor.ancestors, max_depth)
    if inline:
        return inline

    for candidate in (
        descriptor.placeholder,
        descriptor.name,
        descriptor.identifier,
    ):
        if candidate and candidate.strip():
            return candidate.strip()
    return UNKNOWN_LABEL


def _label_from_ancestors(
    ancestors: Sequence[AncestorProbe], max_depth: int
) -> Optional[str]:
    for ancestor in list(ancestors)[:max_depth]:
        label_text = (ancestor.label_text or "").strip()
        if label_text:
            return label_text
        own_text = (ancestor.own_text or "").strip()
        if own_text and len(own_text) < MAX_INLINE_LABEL_LENGTH and ":" in own_text:
            before_colon = own_text.split(":", 1)[0].strip()
            if before_colon:
                return before_colon
    return None


def build_search_text(
    label: Optional[str],
    identifier: Optional[str],
    name: Optional[str],
    placeholder: Optional[str],
    kind: Optional[str],
) -> str:
    pieces = [
        value.strip()
        for value in (label, identifier, name, placeholder, kind)
        if value and value.strip()
    ]
    return " ".join(pieces).casefold()


def classify_text(
    label: Optional[str],
    identifier: Optional[str] = None,
    name: Optional[str] = None,
    placeholder: Optional[str] = None,
    kind: Optional[str] = None,
) -> FieldType:
    text = build_search_text(label, identifier, name, placeholder, kind)
    if not text:
        return FieldType.NONE
    for field_type, pattern in FIELD_PATTERNS:
        if pattern.search(text):
            return field_type
    return FieldType.NONE


def classify_field(
    descriptor: FieldDescriptor, *, max_depth: int = MAX_LABEL_DEPTH
) -> ClassifiedField:
    label = infer_label(descriptor, max_depth=max_depth)
    field_type = classify_text(
        label,
        descriptor.identifier,
        descriptor.name,
        descriptor.placeholder,
        descriptor.kind(),
    )
    return ClassifiedField(
        descriptor=descriptor,
        field_type=field_type,
        label=label,
        already_filled=bool((descriptor.value or "").strip()),
    )


__all__ = [
    "FieldType",
    "FIELD_PATTERNS",
    "MAX_LABEL_DEPTH",
    "UNKNOWN_LABEL",
    "infer_label",
    "build_search_text",
    "classify_text",
    "classify_field",
]
