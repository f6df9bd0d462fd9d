"""Form control discovery and classification over a live page."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import Error as PlaywrightError

from .field_classifier import MAX_LABEL_DEPTH, FieldType, classify_field
from .form_models import AncestorProbe, DetectionResult, FieldDescriptor

FIELD_QUERY = "input, select, textarea"
IGNORED_INPUT_TYPES = {
    "hidden",
    "submit",
    "reset",
    "button",
    "image",
    "checkbox",
    "radio",
}
HIGHLIGHT_COLOR = "#2563eb"

FIELD_PROBE_SCRIPT = """
(el, maxDepth) => {
  const clean = (text) => (text || '').replace(/\\s+/g, ' ').trim();
  const tag = el.tagName.toLowerCase();
  let value = typeof el.value === 'string' ? el.value : null;
  if (tag === 'select') {
    const selected = el.options[el.selectedIndex];
    const chosen = !!selected &&
      (el.selectedIndex > 0 || (selected.getAttribute('value') || '').trim() !== '');
    value = chosen ? selected.value : '';
  }
  let forLabel = null;
  if (el.id) {
    for (const label of Array.from(document.querySelectorAll('label[for]'))) {
      if (label.htmlFor === el.id) {
        forLabel = clean(label.innerText || label.textContent) || null;
        break;
      }
    }
  }
  const ancestors = [];
  let node = el.parentElement;
  while (node && ancestors.length < maxDepth) {
    const label = node.querySelector('label');
    let ownText = '';
    for (const child of Array.from(node.childNodes)) {
      if (child.nodeType === Node.TEXT_NODE) ownText += child.textContent;
    }
    ancestors.push({
      labelText: label ? clean(label.innerText || label.textContent) || null : null,
      ownText: clean(ownText) || null,
    });
    node = node.parentElement;
  }
  return {
    tag,
    type: tag === 'input' ? (el.type || 'text').toLowerCase() : null,
    name: el.getAttribute('name'),
    id: el.id || null,
    placeholder: el.getAttribute('placeholder'),
    value,
    forLabel,
    ancestors,
  };
}
"""

HIGHLIGHT_SCRIPT = """
(el, color) => {
  if (!el.isConnected) return false;
  if (el.dataset.autofillHighlight === undefined) {
    el.dataset.autofillHighlight = JSON.stringify({
      boxShadow: el.style.boxShadow,
      border: el.style.border,
    });
  }
  el.style.boxShadow = `0 0 5px ${color}`;
  el.style.border = `2px solid ${color}`;
  return true;
}
"""

CLEAR_HIGHLIGHT_SCRIPT = """
(el) => {
  const saved = el.dataset.autofillHighlight;
  if (saved === undefined) return false;
  const previous = JSON.parse(saved);
  el.style.boxShadow = previous.boxShadow;
  el.style.border = previous.border;
  delete el.dataset.autofillHighlight;
  return true;
}
"""

Root = Union[Page, ElementHandle]


def detect_fields(
    page: Page,
    logger: logging.Logger,
    *,
    scope: Optional[str] = None,
    highlight: bool = False,
    max_depth: int = MAX_LABEL_DEPTH,
) -> DetectionResult:
    root = resolve_scope(page, scope, logger)
    result = DetectionResult(scope=scope)
    if root is None:
        return result

    for descriptor in extract_field_descriptors(root, logger, max_depth=max_depth):
        classified = classify_field(descriptor, max_depth=max_depth)
        if classified.field_type == FieldType.NONE:
            logger.debug(
                "Unclassified control %s (label=%r)",
                descriptor.canonical_name(),
                classified.label,
            )
            continue
        logger.debug(
            "Control %s classified as %s (label=%r, filled=%s)",
            descriptor.canonical_name(),
            classified.field_type.value,
            classified.label,
            classified.already_filled,
        )
        result.fields.append(classified)

    if not result.detected:
        logger.info("No job application form detected")
        return result

    logger.info("Detected %s application fields", result.field_count)
    if highlight:
        highlight_fields(result, logger)
    return result


def resolve_scope(
    page: Page, scope: Optional[str], logger: logging.Logger
) -> Optional[Root]:
    if not scope:
        return page
    try:
        element = page.query_selector(scope)
    except PlaywrightError as exc:
        logger.warning("Scope %r could not be resolved: %s", scope, exc)
        return None
    if element is None:
        logger.warning("Scope %r matched no element", scope)
    return element


def extract_field_descriptors(
    root: Root,
    logger: logging.Logger,
    *,
    max_depth: int = MAX_LABEL_DEPTH,
) -> List[FieldDescriptor]:
    descriptors: List[FieldDescriptor] = []
    for order, control in enumerate(root.query_selector_all(FIELD_QUERY)):
        try:
            descriptor = _build_field_descriptor(control, order, max_depth)
        except PlaywrightError as exc:
            logger.debug("Skipping control #%s: %s", order, exc)
            continue
        if descriptor is None:
            continue
        if descriptor.tag == "input" and descriptor.kind() in IGNORED_INPUT_TYPES:
            continue
        descriptors.append(descriptor)
    return descriptors


def _build_field_descriptor(
    handle: ElementHandle, order: int, max_depth: int
) -> Optional[FieldDescriptor]:
    data = handle.evaluate(FIELD_PROBE_SCRIPT, max_depth)
    if not data:
        return None
    ancestors = [
        AncestorProbe(
            label_text=item.get("labelText"),
            own_text=item.get("ownText"),
        )
        for item in data.get("ancestors", []) or []
    ]
    return FieldDescriptor(
        handle=handle,
        tag=(data.get("tag") or "input").lower(),
        input_type=data.get("type"),
        name=data.get("name"),
        identifier=data.get("id"),
        placeholder=data.get("placeholder"),
        value=data.get("value"),
        for_label=data.get("forLabel"),
        ancestors=ancestors,
        order=order,
    )


def highlight_fields(result: DetectionResult, logger: logging.Logger) -> int:
    highlighted = 0
    for item in result.fields:
        try:
            if item.control.evaluate(HIGHLIGHT_SCRIPT, HIGHLIGHT_COLOR):
                highlighted += 1
        except PlaywrightError as exc:
            logger.debug(
                "Could not highlight %s: %s", item.descriptor.canonical_name(), exc
            )
    return highlighted


def clear_highlights(result: DetectionResult, logger: logging.Logger) -> None:
    for item in result.fields:
        try:
            item.control.evaluate(CLEAR_HIGHLIGHT_SCRIPT)
        except PlaywrightError as exc:
            logger.debug(
                "Could not clear highlight on %s: %s",
                item.descriptor.canonical_name(),
                exc,
            )


__all__ = [
    "FIELD_QUERY",
    "detect_fields",
    "resolve_scope",
    "extract_field_descriptors",
    "highlight_fields",
    "clear_highlights",
]
