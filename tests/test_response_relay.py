from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from conftest import FakeResponse

from autofill.config import EngineConfig
from autofill.errors import EmptyQuestionError, NetworkFailureError, NotAuthenticatedError
from autofill.response_relay import ResponseRelay


def _relay(response=None, error=None) -> tuple[ResponseRelay, MagicMock]:
    http = MagicMock()
    if error is not None:
        http.post.side_effect = error
    else:
        http.post.return_value = response
    return ResponseRelay(EngineConfig(app_url="https://app.test"), http=http), http


def test_generate_posts_question_and_context():
    relay, http = _relay(FakeResponse(200, {"response": " I love data. "}))

    text = relay.generate(
        "Why us?", job_title="Analyst", company="Acme", job_description="Crunch numbers"
    )

    assert text == "I love data."
    args, kwargs = http.post.call_args
    assert args == ("https://app.test/api/ai/generate-response",)
    assert kwargs["json"] == {
        "question": "Why us?",
        "jobTitle": "Analyst",
        "company": "Acme",
        "jobDescription": "Crunch numbers",
    }
    assert kwargs["timeout"] == 15.0


def test_empty_question_sends_nothing():
    relay, http = _relay(FakeResponse(200, {"response": "x"}))

    with pytest.raises(EmptyQuestionError):
        relay.generate("   ")
    http.post.assert_not_called()


def test_unauthorized():
    relay, _ = _relay(FakeResponse(401, {"message": "Unauthorized"}))

    with pytest.raises(NotAuthenticatedError):
        relay.generate("Why us?")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(400, {"message": "Question is required"}),
        FakeResponse(500, {"message": "Failed"}),
        FakeResponse(200, {"response": ""}),
        FakeResponse(200, invalid_json=True),
    ],
)
def test_failures_surface_as_network_failure(response):
    relay, _ = _relay(response)

    with pytest.raises(NetworkFailureError):
        relay.generate("Why us?")


def test_connection_error():
    relay, _ = _relay(error=requests.ConnectionError("down"))

    with pytest.raises(NetworkFailureError):
        relay.generate("Why us?")
