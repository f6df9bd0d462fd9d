"""Browser-free fakes for Playwright pages and element handles.

The fakes answer the engine's JavaScript probes by identity, so tests run
offline and deterministically.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pytest

from autofill.form_detection import (
    CLEAR_HIGHLIGHT_SCRIPT,
    FIELD_PROBE_SCRIPT,
    HIGHLIGHT_SCRIPT,
)
from autofill.form_filling import FILL_SCRIPT


class FakeControl:
    def __init__(
        self,
        *,
        tag: str = "input",
        type: Optional[str] = "text",
        id: Optional[str] = None,
        name: Optional[str] = None,
        placeholder: Optional[str] = None,
        value: str = "",
        label: Optional[str] = None,
        ancestors: Optional[List[Dict[str, Optional[str]]]] = None,
        options: Optional[List[str]] = None,
    ) -> None:
        self.tag = tag
        self.type = type if tag == "input" else None
        self.id = id
        self.name = name
        self.placeholder = placeholder
        self.value = value
        self.label = label
        self.ancestors = ancestors or []
        self.options = options
        self.connected = True
        self.highlighted = False
        self.events: List[str] = []
        self.writes: List[str] = []

    def evaluate(self, script, arg=None):
        if script is FIELD_PROBE_SCRIPT:
            return {
                "tag": self.tag,
                "type": self.type,
                "name": self.name,
                "id": self.id,
                "placeholder": self.placeholder,
                "value": self.value,
                "forLabel": self.label if self.id else None,
                "ancestors": list(self.ancestors)[:arg],
            }
        if script is FILL_SCRIPT:
            if not self.connected:
                return "detached"
            if self.value.strip() and not arg["overwrite"]:
                return "already_filled"
            value = arg["value"]
            if self.options is not None:
                matches = [opt for opt in self.options if opt.lower() == value.lower()]
                if not matches:
                    return "no_option"
                value = matches[0]
            self.value = value
            self.writes.append(value)
            self.events.extend(["input", "change"])
            return "filled"
        if script is HIGHLIGHT_SCRIPT:
            self.highlighted = self.connected
            return self.connected
        if script is CLEAR_HIGHLIGHT_SCRIPT:
            was = self.highlighted
            self.highlighted = False
            return was
        raise AssertionError(f"unexpected script: {script[:40]!r}")


class FakeText:
    def __init__(self, text: str) -> None:
        self.text = text

    def inner_text(self) -> str:
        return self.text


class FakeForm:
    def __init__(self, controls: List[FakeControl]) -> None:
        self.controls = controls

    def query_selector_all(self, query: str) -> List[FakeControl]:
        return list(self.controls)


class FakePage:
    def __init__(
        self,
        controls: Optional[List[FakeControl]] = None,
        *,
        elements: Optional[Dict[str, object]] = None,
        url: str = "https://jobs.example.com/apply",
        title: str = "Apply",
        selector_error: Optional[Exception] = None,
    ) -> None:
        self.controls = controls or []
        self.selector_error = selector_error
        self.elements = elements or {}
        self.url = url
        self._title = title
        self.queries: List[str] = []

    def query_selector_all(self, query: str) -> List[FakeControl]:
        self.queries.append(query)
        return list(self.controls)

    def query_selector(self, selector: str):
        if self.selector_error is not None:
            raise self.selector_error
        return self.elements.get(selector)

    def title(self) -> str:
        return self._title


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("autofill.tests")


@pytest.fixture
def application_page() -> FakePage:
    return FakePage(
        [
            FakeControl(id="fname", label="First Name"),
            FakeControl(id="em", type="email", label="Email"),
            FakeControl(id="cv", type="file", label="Resume"),
        ]
    )


class FakeResponse:
    def __init__(self, status_code=200, payload=None, *, invalid_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload
