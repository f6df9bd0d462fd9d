"""Per-page detection session and its message-style surface."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from playwright.sync_api import Page

from .config import EngineConfig
from .errors import AutofillError, NotAuthenticatedError
from .form_detection import clear_highlights, detect_fields
from .form_filling import FillReport, autofill
from .form_models import DetectionResult
from .page_context import extract_job_context
from .profile import ProfileClient, UserProfile
from .response_relay import ResponseRelay

Notifier = Callable[[Dict[str, Any]], None]

ACTION_DETECT = "detectForm"
ACTION_AUTOFILL = "autoFill"
ACTION_GENERATE = "generateResponse"
ACTION_SHOW_RESPONSE = "showGeneratedResponse"


class DetectionSession:
    """Owns the detection result and cached profile for one loaded page.

    A new trigger always recomputes detection from scratch; the previous
    result is replaced, never diffed.
    """

    def __init__(
        self,
        page: Page,
        config: Optional[EngineConfig] = None,
        *,
        profile_client: Optional[ProfileClient] = None,
        relay: Optional[ResponseRelay] = None,
        profile: Optional[UserProfile] = None,
        logger: Optional[logging.Logger] = None,
        notify: Optional[Notifier] = None,
    ) -> None:
        self.page = page
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.profile_client = profile_client
        self.relay = relay
        self.notify = notify
        self._profile = profile
        self._result: Optional[DetectionResult] = None

    @property
    def result(self) -> Optional[DetectionResult]:
        return self._result

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    def detect(self, scope: Optional[str] = None) -> DetectionResult:
        if self._result is not None and self.config.highlight:
            clear_highlights(self._result, self.logger)
        self._result = detect_fields(
            self.page,
            self.logger,
            scope=scope,
            highlight=self.config.highlight,
            max_depth=self.config.max_label_depth,
        )
        return self._result

    def load_profile(self, *, refresh: bool = False) -> UserProfile:
        if self._profile is not None and not refresh:
            return self._profile
        if self.profile_client is None:
            raise NotAuthenticatedError("No profile provider configured")
        self._profile = self.profile_client.fetch()
        return self._profile

    def autofill(self, *, overwrite: Optional[bool] = None) -> FillReport:
        profile = self.load_profile()
        result = self._result if self._result is not None else self.detect()
        report = autofill(
            result,
            profile,
            self.logger,
            overwrite=self.config.overwrite if overwrite is None else overwrite,
        )
        if self.config.highlight:
            clear_highlights(result, self.logger)
        return report

    def generate_response(
        self,
        question: str,
        *,
        job_title: Optional[str] = None,
        company: Optional[str] = None,
    ) -> str:
        if self.relay is None:
            raise NotAuthenticatedError("No text generation service configured")
        context = extract_job_context(self.page)
        return self.relay.generate(
            question,
            job_title=job_title or context.job_title,
            company=company or context.company,
            job_description=context.job_description,
        )

    def handle_message(self, message: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        action = message.get("action")
        if action == ACTION_DETECT:
            result = self.detect(message.get("scope"))
            return {"detected": result.detected, "fieldCount": result.field_count}
        if action == ACTION_AUTOFILL:
            try:
                report = self.autofill()
            except AutofillError as exc:
                self.logger.info("Autofill unavailable: %s", exc)
                return {"success": False, "error": exc.code}
            return {"success": True, "filledCount": report.filled_count}
        if action == ACTION_GENERATE:
            self._relay_question(message)
            return None
        self.logger.debug("Ignoring unknown action %r", action)
        return {"success": False, "error": "unknown_action"}

    def _relay_question(self, message: Mapping[str, Any]) -> None:
        try:
            text = self.generate_response(
                message.get("question") or "",
                job_title=message.get("jobTitle"),
                company=message.get("company"),
            )
        except AutofillError as exc:
            self.logger.info("Response generation failed: %s", exc)
            self._emit(
                {
                    "action": ACTION_SHOW_RESPONSE,
                    "error": exc.code,
                    "message": exc.user_message,
                }
            )
            return
        self._emit({"action": ACTION_SHOW_RESPONSE, "response": text})

    def _emit(self, payload: Dict[str, Any]) -> None:
        if self.notify is not None:
            self.notify(payload)
        else:
            self.logger.debug("No listener for %s", payload.get("action"))


__all__ = ["DetectionSession", "Notifier"]
