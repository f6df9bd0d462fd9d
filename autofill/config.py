"""Engine settings shared by the session, its collaborators and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_APP_URL = "https://autoapply-pro.replit.app"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_MAX_LABEL_DEPTH = 3


@dataclass(slots=True)
class EngineConfig:
    app_url: str = DEFAULT_APP_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    overwrite: bool = False
    highlight: bool = True
    max_label_depth: int = DEFAULT_MAX_LABEL_DEPTH
    session_cookie: Optional[str] = None
    api_token: Optional[str] = None

    def endpoint(self, path: str) -> str:
        return f"{self.app_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        timeout_raw = env.get("AUTOAPPLY_REQUEST_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            timeout = DEFAULT_REQUEST_TIMEOUT
        return cls(
            app_url=env.get("AUTOAPPLY_APP_URL") or DEFAULT_APP_URL,
            request_timeout=timeout,
            session_cookie=env.get("AUTOAPPLY_SESSION_COOKIE") or None,
            api_token=env.get("AUTOAPPLY_API_TOKEN") or None,
        )


__all__ = ["EngineConfig", "DEFAULT_APP_URL"]
