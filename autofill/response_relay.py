"""Relay application questions to the dashboard's text-generation endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import EngineConfig
from .errors import EmptyQuestionError, NetworkFailureError, NotAuthenticatedError
from .profile import build_http_session

GENERATE_ENDPOINT = "/api/ai/generate-response"


class ResponseRelay:
    """Pass-through client: one request, no retry."""

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

    def generate(
        self,
        question: str,
        *,
        job_title: Optional[str] = None,
        company: Optional[str] = None,
        job_description: Optional[str] = None,
    ) -> str:
        question = (question or "").strip()
        if not question:
            raise EmptyQuestionError("A question is required")

        url = self.config.endpoint(GENERATE_ENDPOINT)
        payload = {
            "question": question,
            "jobTitle": job_title,
            "company": company,
            "jobDescription": job_description,
        }
        self.logger.debug(
            "Requesting response for %r (%s at %s)", question[:60], job_title, company
        )
        try:
            response = self.http.post(
                url, json=payload, timeout=self.config.request_timeout
            )
        except requests.RequestException as exc:
            self.logger.warning("Response request to %s failed: %s", url, exc)
            raise NetworkFailureError(f"Response request failed: {exc}") from exc

        if response.status_code == 401:
            raise NotAuthenticatedError("Text generation requires a signed-in user")
        if not response.ok:
            self.logger.warning(
                "Response request returned HTTP %s", response.status_code
            )
            raise NetworkFailureError(
                f"Response request returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkFailureError("Response body was not valid JSON") from exc
        text = data.get("response") if isinstance(data, dict) else None
        if not text or not str(text).strip():
            raise NetworkFailureError("Response body carried no generated text")
        return str(text).strip()


__all__ = ["ResponseRelay", "GENERATE_ENDPOINT"]
