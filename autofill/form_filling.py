"""Write planned values into page controls."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError

from .errors import NotAuthenticatedError
from .field_classifier import FieldType
from .form_models import DetectionResult
from .profile import UserProfile
from .value_assignment import FieldAssignment, FieldDecision, plan_assignments

FILLED = "filled"
DETACHED = "detached"
NO_OPTION = "no_option"
ALREADY_FILLED = "already_filled"

# Statuses returned by FILL_SCRIPT. Events fire only after a write. The
# current value is read again at fill time; the user may have typed since
# detection.
FILL_SCRIPT = """
(el, { value, overwrite }) => {
  if (!el.isConnected) return 'detached';
  const isSelect = el.tagName.toLowerCase() === 'select';
  let current = el.value || '';
  if (isSelect) {
    const selected = el.options[el.selectedIndex];
    const chosen = !!selected &&
      (el.selectedIndex > 0 || (selected.getAttribute('value') || '').trim() !== '');
    current = chosen ? selected.value : '';
  }
  if (!overwrite && current.trim() !== '') return 'already_filled';
  if (isSelect) {
    const wanted = String(value).trim().toLowerCase();
    const option = Array.from(el.options).find((opt) =>
      opt.value.toLowerCase() === wanted ||
      (opt.textContent || '').trim().toLowerCase() === wanted
    );
    if (!option) return 'no_option';
    el.value = option.value;
  } else {
    el.value = value;
  }
  el.dispatchEvent(new Event('input', { bubbles: true }));
  el.dispatchEvent(new Event('change', { bubbles: true }));
  return 'filled';
}
"""

SENSITIVE_TYPES = {FieldType.EMAIL, FieldType.PHONE}


@dataclass(slots=True)
class FieldFillResult:
    field_type: FieldType
    field_name: str
    success: bool
    preview: str
    error: str | None = None


@dataclass(slots=True)
class FillReport:
    filled_count: int
    matched_count: int
    results: List[FieldFillResult] = field(default_factory=list)
    decisions: List[FieldDecision] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "filled_count": self.filled_count,
            "matched_count": self.matched_count,
            "results": [
                {
                    "field_type": item.field_type.value,
                    "field_name": item.field_name,
                    "success": item.success,
                    "preview": item.preview,
                    "error": item.error,
                }
                for item in self.results
            ],
            "skipped": [
                {
                    "field_type": decision.field.field_type.value,
                    "label": decision.field.label,
                    "reason": decision.reason,
                }
                for decision in self.decisions
                if not decision.planned
            ],
        }


def autofill(
    result: DetectionResult,
    profile: Optional[UserProfile],
    logger: logging.Logger,
    *,
    overwrite: bool = False,
) -> FillReport:
    if profile is None:
        raise NotAuthenticatedError("Autofill requires a signed-in profile")

    assignments, decisions = plan_assignments(result, profile, overwrite=overwrite)
    for decision in decisions:
        if not decision.planned:
            logger.debug(
                "Skipping %s (%s): %s",
                decision.field.descriptor.canonical_name(),
                decision.field.field_type.value,
                decision.reason,
            )

    results = apply_assignments(assignments, logger, overwrite=overwrite)
    filled = sum(1 for item in results if item.success)
    logger.info("Filled %s of %s detected fields", filled, result.field_count)
    return FillReport(
        filled_count=filled,
        matched_count=result.field_count,
        results=results,
        decisions=decisions,
    )


def apply_assignments(
    assignments: List[FieldAssignment],
    logger: logging.Logger,
    *,
    overwrite: bool = False,
) -> List[FieldFillResult]:
    results: List[FieldFillResult] = []
    for assignment in assignments:
        item = assignment.field
        field_name = item.descriptor.canonical_name()
        preview = _mask_value(item.field_type, assignment.value)
        try:
            status = item.control.evaluate(
                FILL_SCRIPT, {"value": assignment.value, "overwrite": overwrite}
            )
        except PlaywrightError as exc:
            logger.warning("Failed to fill %s: %s", field_name, exc)
            status = str(exc)

        success = status == FILLED
        if success:
            logger.debug("Filled %s (%s)", field_name, item.field_type.value)
        elif status in (DETACHED, NO_OPTION, ALREADY_FILLED):
            logger.debug("Skipped %s: %s", field_name, status)
        results.append(
            FieldFillResult(
                field_type=item.field_type,
                field_name=field_name,
                success=success,
                preview=preview,
                error=None if success else status,
            )
        )
    return results


def _mask_value(field_type: FieldType, value: str) -> str:
    if field_type in SENSITIVE_TYPES:
        return "***"
    if len(value) > 18:
        return f"{value[:8]}…"
    return value


__all__ = ["autofill", "apply_assignments", "FieldFillResult", "FillReport"]
