"""Data models shared across form detection and autofill helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from playwright.sync_api import ElementHandle

if TYPE_CHECKING:  # pragma: no cover
    from .field_classifier import FieldType


@dataclass(slots=True)
class AncestorProbe:
    label_text: Optional[str]
    own_text: Optional[str]


@dataclass(slots=True)
class FieldDescriptor:
    handle: ElementHandle
    tag: str
    input_type: Optional[str]
    name: Optional[str]
    identifier: Optional[str]
    placeholder: Optional[str]
    value: Optional[str]
    for_label: Optional[str]
    ancestors: List[AncestorProbe]
    order: int

    def kind(self) -> str:
        return (self.input_type or self.tag or "").lower()

    def canonical_name(self) -> str:
        for candidate in (self.name, self.identifier, self.placeholder):
            if candidate:
                return candidate
        return f"field_{self.order}"


@dataclass(slots=True)
class ClassifiedField:
    descriptor: FieldDescriptor
    field_type: "FieldType"
    label: str
    already_filled: bool

    @property
    def control(self) -> ElementHandle:
        return self.descriptor.handle

    @property
    def is_file(self) -> bool:
        return self.descriptor.kind() == "file"


@dataclass(slots=True)
class DetectionResult:
    """Ordered outcome of one classification pass, in DOM order."""

    fields: List[ClassifiedField] = field(default_factory=list)
    scope: Optional[str] = None

    @property
    def detected(self) -> bool:
        return bool(self.fields)

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def summary(self) -> List[Tuple[str, str]]:
        return [(item.field_type.value, item.label) for item in self.fields]

    def to_dict(self) -> Dict[str, object]:
        return {
            "detected": self.detected,
            "field_count": self.field_count,
            "scope": self.scope,
            "fields": [
                {
                    "field_type": item.field_type.value,
                    "label": item.label,
                    "name": item.descriptor.canonical_name(),
                    "kind": item.descriptor.kind(),
                    "already_filled": item.already_filled,
                }
                for item in self.fields
            ],
        }


__all__ = [
    "AncestorProbe",
    "FieldDescriptor",
    "ClassifiedField",
    "DetectionResult",
]
